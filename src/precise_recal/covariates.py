"""Covariates: per-dimension projections of a residue.

A covariate turns a residue into one value of its own private type and
knows how to order two such values. ``CovariateSpace`` only ever talks to
covariates through ``compare_erased``, which type-checks both operands
before the typed comparison runs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple, Type

from .exceptions import ConfigurationError, IncompatibleSpaceError
from .residue import Residue


def _three_way(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


class Covariate(ABC):
    """A single recalibration dimension."""

    name: str = "covariate"
    value_type: Type = object

    @abstractmethod
    def compute(self, residue: Residue) -> Any:
        """Project a residue onto this dimension."""

    def compare(self, left: Any, right: Any) -> int:
        """Order two values of ``value_type``; negative, zero or positive."""
        return _three_way(left, right)

    def compare_erased(self, left: Any, right: Any) -> int:
        for value in (left, right):
            if not self._accepts(value):
                raise IncompatibleSpaceError(
                    f"value {value!r} does not belong to covariate {self.name!r}",
                    {"covariate": self.name, "expected": self.value_type.__name__,
                     "actual": type(value).__name__},
                )
        return self.compare(left, right)

    def _accepts(self, value: Any) -> bool:
        # bool is an int subclass but never a valid count or cycle
        if isinstance(value, bool) and self.value_type is not bool:
            return False
        return isinstance(value, self.value_type)

    def coerce(self, raw: Any) -> Any:
        """Convert a persisted cell back into a ``value_type`` value."""
        return self.value_type(raw)

    def definition(self) -> Tuple:
        """Parameters that distinguish two covariates of the same class."""
        return ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Covariate):
            return NotImplemented
        return type(self) is type(other) and self.definition() == other.definition()

    def __hash__(self) -> int:
        return hash((type(self).__qualname__, self.definition()))

    def __repr__(self) -> str:
        params = ", ".join(repr(part) for part in self.definition())
        return f"{type(self).__name__}({params})"


class ReadGroupCovariate(Covariate):
    name = "read_group"
    value_type = str

    def compute(self, residue: Residue) -> str:
        return residue.read_group


class QualityScoreCovariate(Covariate):
    name = "quality"
    value_type = int

    def compute(self, residue: Residue) -> int:
        return int(residue.quality)


class CycleCovariate(Covariate):
    name = "cycle"
    value_type = int

    def compute(self, residue: Residue) -> int:
        return int(residue.cycle)


class DinucleotideCovariate(Covariate):
    """Previous base followed by the current base, e.g. ``"AC"``."""

    name = "dinucleotide"
    value_type = str

    VALID_BASES = frozenset("ACGT")

    def compute(self, residue: Residue) -> str:
        previous = residue.previous_base.upper() if residue.previous_base else "N"
        current = residue.base.upper() if residue.base else "N"
        if previous not in self.VALID_BASES:
            previous = "N"
        if current not in self.VALID_BASES:
            current = "N"
        return previous + current


class ResidueFieldCovariate(Covariate):
    """Project an arbitrary residue attribute as a covariate value."""

    def __init__(self, field: str, value_type: Type = str):
        self.field = field
        self.name = field
        self.value_type = value_type

    def compute(self, residue: Residue) -> Any:
        return self.value_type(getattr(residue, self.field))

    def definition(self) -> Tuple:
        return (self.field, self.value_type)


COVARIATE_REGISTRY: Dict[str, Type[Covariate]] = {
    ReadGroupCovariate.name: ReadGroupCovariate,
    QualityScoreCovariate.name: QualityScoreCovariate,
    CycleCovariate.name: CycleCovariate,
    DinucleotideCovariate.name: DinucleotideCovariate,
}


def covariate_by_name(name: str) -> Covariate:
    try:
        return COVARIATE_REGISTRY[name]()
    except KeyError:
        raise ConfigurationError(
            f"unknown covariate: {name}",
            {"known": sorted(COVARIATE_REGISTRY)},
        ) from None
