"""
Tests for run configuration loading and validation.
"""

import pytest
import yaml

from precise_recal.config import (
    EstimatorConfig,
    ParallelConfig,
    RecalConfig,
    create_default_config,
    dump_config,
    load_config,
)
from precise_recal.exceptions import ConfigurationError
from precise_recal.space import CovariateSpace


def test_default_config():
    config = create_default_config(seed=3)
    assert config.seed == 3
    assert config.covariates == ["read_group", "quality", "cycle", "dinucleotide"]
    assert config.estimator == EstimatorConfig(alpha=1.0, beta=1.0, smoothing=1)
    assert config.simulation is not None


def test_space_from_config(small_config):
    space = small_config.space()
    assert isinstance(space, CovariateSpace)
    assert space.names == tuple(small_config.covariates)


def test_dump_and_load(small_config, temp_dir):
    path = temp_dir / "config.yaml"
    dump_config(small_config, path)
    loaded = load_config(path)
    assert loaded == small_config
    assert loaded.config_hash() == small_config.config_hash()


def test_load_minimal_yaml(temp_dir):
    path = temp_dir / "config.yaml"
    path.write_text(yaml.safe_dump({"run_id": "r1", "seed": 1, "covariates": ["cycle"]}))
    config = load_config(path)
    assert config.covariates == ["cycle"]
    assert config.parallel == ParallelConfig()
    assert config.simulation is None


def test_config_hash_changes_with_content(small_config):
    other = create_default_config(seed=small_config.seed)
    assert other.config_hash() != small_config.config_hash()
    assert len(small_config.config_hash()) == 16


@pytest.mark.parametrize(
    "overrides",
    [
        {"covariates": []},
        {"covariates": ["cycle", "strand"]},
        {"covariates": ["cycle", "cycle"]},
        {"estimator": EstimatorConfig(alpha=0.0)},
        {"estimator": EstimatorConfig(smoothing=0)},
        {"parallel": ParallelConfig(chunk_size=0)},
        {"parallel": ParallelConfig(n_jobs=0)},
    ],
)
def test_invalid_config_rejected(overrides):
    kwargs = {"run_id": "bad", "seed": 1, "covariates": ["cycle"]}
    kwargs.update(overrides)
    with pytest.raises(ConfigurationError):
        RecalConfig(**kwargs)


def test_load_config_missing_field(temp_dir):
    path = temp_dir / "config.yaml"
    path.write_text(yaml.safe_dump({"seed": 1}))
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_load_config_not_a_mapping(temp_dir):
    path = temp_dir / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigurationError):
        load_config(path)
