"""Covariate keys and the covariate space that produces and orders them."""

from __future__ import annotations

import functools
from typing import Any, Iterable, Iterator, Sequence, Tuple

from .covariates import Covariate, covariate_by_name
from .exceptions import ConfigurationError, IncompatibleSpaceError
from .residue import Residue

_KEY_HASH_SALT = 0xD20D1E51
_SPACE_HASH_SALT = 0x48C35799


class CovariateKey:
    """Immutable tuple of covariate values, one per dimension of a space.

    Keys compare equal structurally but carry no ordering of their own; use
    ``CovariateSpace.compare_keys`` or ``CovariateSpace.ordering``.
    """

    __slots__ = ("_parts", "_hash")

    def __init__(self, parts: Iterable[Any]):
        self._parts: Tuple[Any, ...] = tuple(parts)
        self._hash = hash((_KEY_HASH_SALT, self._parts))

    @property
    def parts(self) -> Tuple[Any, ...]:
        return self._parts

    def __len__(self) -> int:
        return len(self._parts)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._parts)

    def __getitem__(self, index: int) -> Any:
        return self._parts[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CovariateKey):
            return NotImplemented
        return self._parts == other._parts

    def __hash__(self) -> int:
        return self._hash

    def __getstate__(self):
        return {"parts": self._parts}

    def __setstate__(self, state):
        self._parts = state["parts"]
        self._hash = hash((_KEY_HASH_SALT, self._parts))

    def __repr__(self) -> str:
        return f"CovariateKey({list(self._parts)!r})"

    def __str__(self) -> str:
        return "[" + ", ".join(str(part) for part in self._parts) + "]"


class CovariateSpace:
    """An ordered, non-empty list of covariates.

    The space projects residues into keys and defines the total order over
    those keys: dimensions are compared in order with each covariate's own
    comparator, and the first non-equal dimension decides.
    """

    def __init__(self, covariates: Sequence[Covariate]):
        covariates = tuple(covariates)
        if not covariates:
            raise ConfigurationError("a CovariateSpace needs at least one covariate")
        for covariate in covariates:
            if not isinstance(covariate, Covariate):
                raise ConfigurationError(
                    f"not a covariate: {covariate!r}",
                    {"type": type(covariate).__name__},
                )
        self._covariates: Tuple[Covariate, ...] = covariates
        self._ordering = functools.cmp_to_key(self.compare_keys)

    @classmethod
    def of(cls, *covariates: Covariate) -> "CovariateSpace":
        return cls(covariates)

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "CovariateSpace":
        return cls([covariate_by_name(name) for name in names])

    @property
    def covariates(self) -> Tuple[Covariate, ...]:
        return self._covariates

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(covariate.name for covariate in self._covariates)

    @property
    def ordering(self):
        """Sort key for ``CovariateKey`` values produced by this space."""
        return self._ordering

    def __len__(self) -> int:
        return len(self._covariates)

    def project(self, residue: Residue) -> CovariateKey:
        return CovariateKey(covariate.compute(residue) for covariate in self._covariates)

    __call__ = project

    def compare_keys(self, left: CovariateKey, right: CovariateKey) -> int:
        """Three-way comparison of two keys from this space."""
        n = len(self._covariates)
        if len(left) != n or len(right) != n:
            raise IncompatibleSpaceError(
                f"cannot compare keys of length {len(left)} and {len(right)} "
                f"in a space of {n} covariates",
                {"space": list(self.names)},
            )
        for covariate, lhs, rhs in zip(self._covariates, left.parts, right.parts):
            result = covariate.compare_erased(lhs, rhs)
            if result != 0:
                return result
        return 0

    def sorted_keys(self, keys: Iterable[CovariateKey]) -> list:
        return sorted(keys, key=self._ordering)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CovariateSpace):
            return NotImplemented
        return self._covariates == other._covariates

    def __hash__(self) -> int:
        return hash((_SPACE_HASH_SALT, self._covariates))

    # The cached ordering wraps a bound method and is rebuilt on unpickling.
    def __getstate__(self):
        return {"covariates": self._covariates}

    def __setstate__(self, state):
        self._covariates = state["covariates"]
        self._ordering = functools.cmp_to_key(self.compare_keys)

    def __repr__(self) -> str:
        return f"CovariateSpace({list(self._covariates)!r})"
