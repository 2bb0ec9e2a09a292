"""Artifact helpers for residue inputs and recalibration tables."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import pandas as pd

from .config import EstimatorConfig
from .exceptions import FileFormatError
from .space import CovariateSpace
from .table import ObservationTable

logger = logging.getLogger(__name__)

ARTIFACT_FILENAMES = {
    "residues": "residues.parquet",
    "table_parquet": "recal_table.parquet",
    "table_tsv": "recal_table.tsv",
    "config": "config.json",
    "run_context": "run_context.json",
}


class RecalIO:
    """Read and write artifacts under deterministic paths."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def path(self, key: str) -> Path:
        if key not in ARTIFACT_FILENAMES:
            msg = f"unknown artifact key: {key}"
            raise KeyError(msg)
        return self.base_dir / ARTIFACT_FILENAMES[key]

    def write_parquet(self, key: str, df: pd.DataFrame) -> Path:
        path = self.path(key)
        df.to_parquet(path, index=False)
        return path

    def read_parquet(self, key: str) -> pd.DataFrame:
        return pd.read_parquet(self.path(key))

    def write_json(self, key: str, payload: Dict[str, Any]) -> Path:
        path = self.path(key)
        path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        return path

    def write_table(self, table: ObservationTable, estimator: EstimatorConfig) -> Dict[str, Path]:
        """Persist the table as sorted parquet plus the sorted text rendering."""
        frame = table.to_frame(estimator.alpha, estimator.beta, estimator.smoothing)
        parquet_path = self.write_parquet("table_parquet", frame)
        tsv_path = self.path("table_tsv")
        text = table.render(sorted_order=True)
        tsv_path.write_text(text + "\n" if text else "", encoding="utf-8")
        logger.info(f"Wrote {len(table)} table entries to {self.base_dir}")
        return {"table_parquet": parquet_path, "table_tsv": tsv_path}


def read_table(path: str | Path, space: CovariateSpace) -> ObservationTable:
    """Load a table written by ``RecalIO.write_table``."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"table not found: {path}")
    try:
        frame = pd.read_parquet(path)
    except (OSError, ValueError) as exc:
        raise FileFormatError(f"cannot read table {path}: {exc}", {"path": str(path)}) from exc
    return ObservationTable.from_frame(space, frame)


def read_residue_frame(path: str | Path) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"residues not found: {path}")
    if path.suffix in {".tsv", ".txt"}:
        return pd.read_csv(path, sep="\t")
    if path.suffix == ".csv":
        return pd.read_csv(path)
    return pd.read_parquet(path)
