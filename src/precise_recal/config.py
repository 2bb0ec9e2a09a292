"""Configuration management for precise-recal runs."""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .covariates import COVARIATE_REGISTRY
from .exceptions import ConfigurationError
from .space import CovariateSpace

DEFAULT_COVARIATES = ["read_group", "quality", "cycle", "dinucleotide"]


@dataclass
class EstimatorConfig:
    """Parameters of the two quality estimators."""
    alpha: float = 1.0
    beta: float = 1.0
    smoothing: int = 1


@dataclass
class ParallelConfig:
    """Sharding of residues across worker processes."""
    n_jobs: int = 1
    chunk_size: int = 10000


@dataclass
class SimulationConfig:
    """Configuration for synthetic residue generation."""
    n_reads: int = 200
    read_length: int = 50
    read_groups: List[str] = field(default_factory=lambda: ["rg1", "rg2"])
    mean_quality: float = 30.0
    quality_sd: float = 6.0
    cycle_error_slope: float = 0.02


@dataclass
class RecalConfig:
    """Main run configuration."""
    run_id: str
    seed: int
    covariates: List[str]
    estimator: EstimatorConfig = field(default_factory=EstimatorConfig)
    parallel: ParallelConfig = field(default_factory=ParallelConfig)
    simulation: Optional[SimulationConfig] = None

    def __post_init__(self) -> None:
        validate_config(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    def config_hash(self) -> str:
        """Compute deterministic hash of configuration."""
        config_str = json.dumps(self.to_dict(), sort_keys=True)
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    def space(self) -> CovariateSpace:
        return CovariateSpace.from_names(self.covariates)


def validate_config(config: RecalConfig) -> None:
    if not config.covariates:
        raise ConfigurationError("at least one covariate must be configured")
    unknown = [name for name in config.covariates if name not in COVARIATE_REGISTRY]
    if unknown:
        raise ConfigurationError(
            f"unknown covariates: {unknown}",
            {"known": sorted(COVARIATE_REGISTRY)},
        )
    if len(set(config.covariates)) != len(config.covariates):
        raise ConfigurationError(f"duplicate covariates in {config.covariates}")
    est = config.estimator
    if est.alpha <= 0 or est.beta <= 0:
        raise ConfigurationError(
            f"estimator prior must be positive, got alpha={est.alpha}, beta={est.beta}"
        )
    if est.smoothing < 1:
        raise ConfigurationError(f"smoothing must be >= 1, got {est.smoothing}")
    if config.parallel.chunk_size <= 0:
        raise ConfigurationError(f"chunk_size must be positive, got {config.parallel.chunk_size}")
    if config.parallel.n_jobs == 0 or config.parallel.n_jobs < -1:
        raise ConfigurationError(f"n_jobs must be -1 or positive, got {config.parallel.n_jobs}")


def config_from_dict(data: Dict[str, Any]) -> RecalConfig:
    try:
        simulation = data.get('simulation')
        return RecalConfig(
            run_id=data['run_id'],
            seed=data['seed'],
            covariates=list(data.get('covariates', DEFAULT_COVARIATES)),
            estimator=EstimatorConfig(**data.get('estimator', {})),
            parallel=ParallelConfig(**data.get('parallel', {})),
            simulation=SimulationConfig(**simulation) if simulation else None,
        )
    except (KeyError, TypeError) as exc:
        raise ConfigurationError(f"invalid configuration: {exc}") from exc


def load_config(path: str | Path) -> RecalConfig:
    """Load configuration from YAML file."""
    with open(path, 'r') as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ConfigurationError(f"configuration {path} is not a mapping")
    return config_from_dict(data)


def dump_config(config: RecalConfig, path: str | Path) -> None:
    """Save configuration to YAML file."""
    with open(path, 'w') as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False)


def create_default_config(seed: int = 7) -> RecalConfig:
    """Configuration used when no file is given."""
    return RecalConfig(
        run_id="default",
        seed=seed,
        covariates=list(DEFAULT_COVARIATES),
        simulation=SimulationConfig(),
    )
