"""Mismatch counts and the empirical quality estimators built on them."""

from __future__ import annotations

import numbers
from dataclasses import dataclass

from .exceptions import ConfigurationError, InvariantViolationError
from .quality import PhredQualityScore

REFERENCE_MAX_QUALITY = PhredQualityScore(50)


@dataclass(frozen=True)
class Observation:
    """Immutable (total, mismatches) count pair with ``0 <= mismatches <= total``.

    Observations form a commutative monoid under ``+`` with ``Observation.empty()``
    as the identity, so partial counts may be combined in any order.
    """

    total: int
    mismatches: int

    def __post_init__(self) -> None:
        for field_name in ("total", "mismatches"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvariantViolationError(
                    f"{field_name} must be an integer count, got {value!r}",
                    {field_name: value},
                )
            object.__setattr__(self, field_name, int(value))
        if self.mismatches < 0 or self.mismatches > self.total:
            raise InvariantViolationError(
                f"invalid observation: mismatches={self.mismatches}, total={self.total}",
                {"total": self.total, "mismatches": self.mismatches},
            )

    @classmethod
    def empty(cls) -> "Observation":
        return EMPTY_OBSERVATION

    @classmethod
    def of(cls, is_mismatch: bool) -> "Observation":
        """Unit observation for a single residue."""
        return cls(1, 1 if is_mismatch else 0)

    def __add__(self, other: "Observation") -> "Observation":
        if not isinstance(other, Observation):
            return NotImplemented
        return Observation(self.total + other.total, self.mismatches + other.mismatches)

    def merge(self, other: "Observation") -> "Observation":
        return self + other

    # Posterior mean of the error rate under a Binomial likelihood with a
    # Beta(alpha, beta) prior. alpha = beta = 1 is Laplace's rule of succession.
    def bayesian_error_probability(self, alpha: float = 1.0, beta: float = 1.0) -> float:
        if alpha <= 0 or beta <= 0:
            raise ConfigurationError(
                f"Beta prior parameters must be positive, got alpha={alpha}, beta={beta}",
                {"alpha": alpha, "beta": beta},
            )
        return (alpha + self.mismatches) / (alpha + beta + self.total)

    def bayesian_quality_estimate(self, alpha: float = 1.0, beta: float = 1.0) -> PhredQualityScore:
        return PhredQualityScore.from_error_probability(
            self.bayesian_error_probability(alpha, beta)
        )

    @property
    def empirical_quality(self) -> PhredQualityScore:
        return self.bayesian_quality_estimate()

    # Historical GATK formula, which GATK calls "Yates's correction" although
    # it is not the textbook correction of that name. Kept as-is for output
    # compatibility; it is not interchangeable with the Bayesian estimate.
    def reference_error_probability(self, smoothing: int = 1) -> float:
        if smoothing < 1:
            raise ConfigurationError(
                f"smoothing must be >= 1, got {smoothing}", {"smoothing": smoothing}
            )
        return (smoothing + self.mismatches) / (smoothing + self.total)

    def reference_quality_estimate_unclipped(self, smoothing: int = 1) -> PhredQualityScore:
        return PhredQualityScore.from_error_probability(
            self.reference_error_probability(smoothing)
        )

    def reference_quality_estimate(self, smoothing: int = 1) -> PhredQualityScore:
        return min(REFERENCE_MAX_QUALITY, self.reference_quality_estimate_unclipped(smoothing))

    def __str__(self) -> str:
        return f"{self.mismatches} / {self.total} ({self.empirical_quality})"


EMPTY_OBSERVATION = Observation(0, 0)


def merge(left: Observation, right: Observation) -> Observation:
    return left + right
