"""Observation tables: group-by-sum of observations per covariate key."""

from __future__ import annotations

import hashlib
import logging
import numbers
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .exceptions import FileFormatError, IncompatibleSpaceError
from .observation import EMPTY_OBSERVATION, Observation
from .residue import Residue
from .schemas import RECAL_TABLE_COUNTS_SCHEMA
from .space import CovariateKey, CovariateSpace

logger = logging.getLogger(__name__)

TableEntry = Tuple[CovariateKey, Observation]


def _count(value, column: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise FileFormatError(
            f"non-integer {column} count in persisted table: {value!r}",
            {"column": column, "value": repr(value)},
        )
    return int(value)


class ObservationTable:
    """Mutable mapping from ``CovariateKey`` to ``Observation`` for one space.

    Instances are not thread-safe. Build one table per shard and combine
    them with ``merge_into``; since observation merging is associative and
    commutative, any reduction order gives the same table.
    """

    def __init__(self, space: CovariateSpace, entries: Optional[Iterable[TableEntry]] = None):
        self._space = space
        self._entries: Dict[CovariateKey, Observation] = {}
        for key, observation in entries or ():
            self._add(key, observation)

    @classmethod
    def empty(cls, space: CovariateSpace) -> "ObservationTable":
        return cls(space)

    @classmethod
    def from_residues(cls, space: CovariateSpace, residues: Iterable[Residue]) -> "ObservationTable":
        """Project every residue and sum the unit observations per key."""
        return cls(space, ((space.project(residue), Observation.of(residue.is_snp)) for residue in residues))

    @classmethod
    def from_frame(cls, space: CovariateSpace, frame: pd.DataFrame) -> "ObservationTable":
        """Rebuild a table from the output of ``to_frame``."""
        missing = [name for name in space.names if name not in frame.columns]
        if missing:
            raise FileFormatError(
                f"table is missing covariate columns {missing}",
                {"expected": list(space.names), "columns": list(frame.columns)},
            )
        RECAL_TABLE_COUNTS_SCHEMA.validate(frame)
        columns = list(space.names) + ["total", "mismatches"]
        entries = []
        for row in frame[columns].itertuples(index=False, name=None):
            *values, total, mismatches = row
            key = CovariateKey(
                covariate.coerce(value) for covariate, value in zip(space.covariates, values)
            )
            entries.append((key, Observation(_count(total, "total"), _count(mismatches, "mismatches"))))
        return cls(space, entries)

    @property
    def space(self) -> CovariateSpace:
        return self._space

    def _add(self, key: CovariateKey, observation: Observation) -> None:
        self._entries[key] = self._entries.get(key, EMPTY_OBSERVATION) + observation

    def merge_into(self, other: "ObservationTable") -> "ObservationTable":
        """Fold ``other`` into this table in place and return this table."""
        if self._space != other._space:
            raise IncompatibleSpaceError(
                "can only combine ObservationTables with compatible CovariateSpaces",
                {"left": list(self._space.names), "right": list(other._space.names)},
            )
        for key, observation in other._entries.items():
            self._add(key, observation)
        logger.debug(f"Merged {len(other)} entries; table now holds {len(self)} keys")
        return self

    def __iadd__(self, other: "ObservationTable") -> "ObservationTable":
        return self.merge_into(other)

    def export_sorted(self) -> List[TableEntry]:
        """Snapshot of all entries ordered by the space's key ordering."""
        ordering = self._space.ordering
        return sorted(self._entries.items(), key=lambda entry: ordering(entry[0]))

    def items(self) -> List[TableEntry]:
        """Snapshot of all entries in insertion order."""
        return list(self._entries.items())

    def get(self, key: CovariateKey, default: Optional[Observation] = None) -> Optional[Observation]:
        return self._entries.get(key, default)

    def __getitem__(self, key: CovariateKey) -> Observation:
        return self._entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObservationTable):
            return NotImplemented
        return self._space == other._space and self._entries == other._entries

    __hash__ = None

    def total_observation(self) -> Observation:
        result = EMPTY_OBSERVATION
        for observation in self._entries.values():
            result = result + observation
        return result

    def to_frame(self, alpha: float = 1.0, beta: float = 1.0, smoothing: int = 1) -> pd.DataFrame:
        """Sorted table with one column per covariate plus counts and qualities."""
        records = []
        for key, observation in self.export_sorted():
            record = dict(zip(self._space.names, key.parts))
            record.update(
                {
                    "total": observation.total,
                    "mismatches": observation.mismatches,
                    "empirical_quality": observation.bayesian_quality_estimate(alpha, beta).phred,
                    "reference_quality": observation.reference_quality_estimate(smoothing).phred,
                }
            )
            records.append(record)
        columns = list(self._space.names) + ["total", "mismatches", "empirical_quality", "reference_quality"]
        return pd.DataFrame.from_records(records, columns=columns)

    def render(self, sorted_order: bool = False) -> str:
        entries = self.export_sorted() if sorted_order else self._entries.items()
        return "\n".join(f"{key}\t{observation}" for key, observation in entries)

    def fingerprint(self) -> str:
        """SHA256 of the sorted rendering; equal tables share a fingerprint."""
        return hashlib.sha256(self.render(sorted_order=True).encode("utf-8")).hexdigest()

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"ObservationTable(space={self._space!r}, entries={len(self._entries)})"
