"""Per-base residue records consumed by covariates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import pandas as pd

from .schemas import RESIDUE_SCHEMA


@dataclass(frozen=True, slots=True)
class Residue:
    """One aligned base of a sequencing read."""

    read_group: str
    cycle: int
    base: str
    previous_base: str
    quality: int
    is_mismatch: bool

    @property
    def is_snp(self) -> bool:
        return self.is_mismatch


def residues_from_frame(frame: pd.DataFrame) -> Iterator[Residue]:
    """Yield residues from a DataFrame following ``RESIDUE_SCHEMA``."""
    RESIDUE_SCHEMA.validate(frame)
    columns = list(RESIDUE_SCHEMA.schema.names())
    for row in frame[columns].itertuples(index=False, name=None):
        read_group, cycle, base, previous_base, quality, is_mismatch = row
        yield Residue(
            read_group=str(read_group),
            cycle=int(cycle),
            base=str(base),
            previous_base=str(previous_base),
            quality=int(quality),
            is_mismatch=bool(is_mismatch),
        )
