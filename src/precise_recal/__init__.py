"""Precise recal: covariate-grouped mismatch statistics for base-quality recalibration."""

from __future__ import annotations

__version__ = "0.1.0"

# Core aggregation
from .covariates import (
    Covariate,
    CycleCovariate,
    DinucleotideCovariate,
    QualityScoreCovariate,
    ReadGroupCovariate,
    ResidueFieldCovariate,
    covariate_by_name,
)
from .observation import EMPTY_OBSERVATION, Observation, merge
from .quality import PhredQualityScore
from .residue import Residue, residues_from_frame
from .space import CovariateKey, CovariateSpace
from .table import ObservationTable

# Sharded construction
from .parallel import build_table_parallel, shard_residues, tree_reduce

# Configuration and I/O
from .config import RecalConfig, load_config, dump_config, create_default_config
from .io import RecalIO, read_table

# Errors
from .exceptions import (
    ConfigurationError,
    IncompatibleSpaceError,
    InvariantViolationError,
    PreciseRecalError,
)

__all__ = [
    "__version__",
    # Core
    "Covariate",
    "CycleCovariate",
    "DinucleotideCovariate",
    "QualityScoreCovariate",
    "ReadGroupCovariate",
    "ResidueFieldCovariate",
    "covariate_by_name",
    "CovariateKey",
    "CovariateSpace",
    "EMPTY_OBSERVATION",
    "Observation",
    "merge",
    "ObservationTable",
    "PhredQualityScore",
    "Residue",
    "residues_from_frame",
    # Parallel
    "build_table_parallel",
    "shard_residues",
    "tree_reduce",
    # Configuration
    "RecalConfig",
    "load_config",
    "dump_config",
    "create_default_config",
    "RecalIO",
    "read_table",
    # Errors
    "PreciseRecalError",
    "ConfigurationError",
    "IncompatibleSpaceError",
    "InvariantViolationError",
]
