"""
Logging configuration for precise-recal.

Library modules log through ``logging.getLogger(__name__)``; the CLI calls
``setup_logging`` once to attach handlers to the package logger.
"""

import functools
import logging
import sys
import time
from pathlib import Path
from typing import Any, Callable, Optional

PACKAGE_LOGGER = "precise_recal"


class PerformanceLogger:
    """Context manager that logs the wall time of an aggregation step."""

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.log(self.level, f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            self.duration = time.perf_counter() - self.start_time
            if exc_type is None:
                self.logger.log(self.level, f"Completed {self.operation} in {self.duration:.3f}s")
            else:
                self.logger.error(f"Failed {self.operation} after {self.duration:.3f}s: {exc_val}")
        return False


def time_it(operation: str = None, level: int = logging.DEBUG):
    """Decorator for automatic performance logging."""
    def decorator(func: Callable) -> Callable:
        op_name = operation or f"{func.__module__}.{func.__name__}"

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            logger = logging.getLogger(func.__module__)
            with PerformanceLogger(logger, op_name, level=level):
                return func(*args, **kwargs)
        return wrapper
    return decorator


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console_output: bool = True,
    format_string: Optional[str] = None
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        console_output: Whether to log to stderr
        format_string: Custom format string

    Returns:
        Configured package logger
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    formatter = logging.Formatter(format_string)

    # stdout carries the CLI's JSON summaries, so log lines go to stderr
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger
