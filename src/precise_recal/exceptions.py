"""
Custom exceptions for the precise-recal package.

All of these are precondition failures raised at construction or merge
time. They are surfaced to the caller immediately and never retried.
"""


class PreciseRecalError(Exception):
    """Base exception for precise-recal errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(PreciseRecalError):
    """Raised when a covariate space or run configuration is invalid."""
    pass


class InvariantViolationError(PreciseRecalError):
    """Raised when an Observation is built with inconsistent counts."""
    pass


class IncompatibleSpaceError(PreciseRecalError):
    """Raised when keys or tables from different covariate spaces are mixed."""
    pass


class ValidationError(PreciseRecalError):
    """Raised when tabular input fails schema validation."""
    pass


class FileFormatError(PreciseRecalError):
    """Raised when a persisted table cannot be read back."""
    pass
