"""Phred-scaled quality scores."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

# Largest score representable in a SAM quality string (ASCII 126 - 33).
MAX_PHRED_SCORE = 93
MIN_ERROR_PROBABILITY = 10.0 ** (-MAX_PHRED_SCORE / 10.0)


@dataclass(frozen=True, order=True)
class PhredQualityScore:
    """A quality score on the Phred scale, ``Q = -10 log10(p_error)``.

    Scores are kept as floats so that estimators stay strictly monotone in
    their error probability; ``rounded`` gives the integer score written to
    quality strings.
    """

    phred: float

    def __post_init__(self) -> None:
        if not 0 <= self.phred <= MAX_PHRED_SCORE:
            raise ValueError(f"phred score must lie in [0, {MAX_PHRED_SCORE}], got {self.phred}")

    @classmethod
    def from_error_probability(cls, p: float) -> "PhredQualityScore":
        if not 0.0 <= p <= 1.0:
            raise ValueError(f"error probability must lie in [0, 1], got {p}")
        p = max(float(p), MIN_ERROR_PROBABILITY)
        return cls(min(float(-10.0 * np.log10(p)), float(MAX_PHRED_SCORE)) + 0.0)

    @property
    def error_probability(self) -> float:
        return float(10.0 ** (-self.phred / 10.0))

    @property
    def success_probability(self) -> float:
        return 1.0 - self.error_probability

    def rounded(self) -> int:
        return int(np.floor(self.phred + 0.5))

    def to_ascii(self, offset: int = 33) -> str:
        return chr(self.rounded() + offset)

    def __str__(self) -> str:
        return f"{self.phred:.2f}"
