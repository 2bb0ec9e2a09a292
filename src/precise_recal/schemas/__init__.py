"""Schema validators for residue inputs and recalibration tables."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd
import polars as pl

from ..exceptions import ValidationError


@dataclass(frozen=True)
class Schema:
    name: str
    schema: pl.Schema

    def validate(self, frame: pd.DataFrame) -> None:
        missing = [column for column in self.schema.names() if column not in frame.columns]
        if missing:
            raise ValidationError(
                f"{self.name} schema validation failed: missing columns {missing}",
                {"schema": self.name, "missing": missing},
            )
        try:
            pl.from_pandas(frame[list(self.schema.names())]).cast(self.schema)
        except Exception as exc:  # pragma: no cover - polars details vary
            msg = f"{self.name} schema validation failed: {exc}"
            raise ValidationError(msg, {"schema": self.name}) from exc


RESIDUE_SCHEMA = Schema(
    name="residues",
    schema=pl.Schema(
        {
            "read_group": pl.Utf8,
            "cycle": pl.Int64,
            "base": pl.Utf8,
            "previous_base": pl.Utf8,
            "quality": pl.Int64,
            "is_mismatch": pl.Boolean,
        }
    ),
)

RECAL_TABLE_COUNTS_SCHEMA = Schema(
    name="recal_table",
    schema=pl.Schema(
        {
            "total": pl.Int64,
            "mismatches": pl.Int64,
        }
    ),
)

__all__ = ["Schema", "RESIDUE_SCHEMA", "RECAL_TABLE_COUNTS_SCHEMA"]
