"""
Test configuration and fixtures for precise-recal tests.
"""

import shutil
import tempfile
from pathlib import Path

import numpy as np
import pytest

from precise_recal.config import RecalConfig, SimulationConfig
from precise_recal.covariates import (
    CycleCovariate,
    DinucleotideCovariate,
    QualityScoreCovariate,
    ReadGroupCovariate,
    ResidueFieldCovariate,
)
from precise_recal.residue import Residue
from precise_recal.space import CovariateSpace


@pytest.fixture
def seed():
    """Fixed random seed for reproducible tests."""
    return 42


@pytest.fixture
def temp_dir():
    """Temporary directory for test outputs."""
    temp_dir = tempfile.mkdtemp()
    yield Path(temp_dir)
    shutil.rmtree(temp_dir)


@pytest.fixture
def full_space():
    """Space over all built-in covariates."""
    return CovariateSpace([
        ReadGroupCovariate(),
        QualityScoreCovariate(),
        CycleCovariate(),
        DinucleotideCovariate(),
    ])


@pytest.fixture
def cycle_space():
    return CovariateSpace([CycleCovariate()])


@pytest.fixture
def cycle_context_space():
    return CovariateSpace([CycleCovariate(), DinucleotideCovariate()])


@pytest.fixture
def numeric_text_space():
    """Two dimensions: a numeric cycle followed by a lexicographic base."""
    return CovariateSpace([
        ResidueFieldCovariate("cycle", int),
        ResidueFieldCovariate("base", str),
    ])


@pytest.fixture
def residue_factory():
    """Factory for single residues with overridable fields."""
    return make_residue


@pytest.fixture
def sample_residues(seed):
    """A few hundred residues with repeated keys."""
    rng = np.random.default_rng(seed)
    residues = []
    for i in range(300):
        residues.append(
            make_residue(
                read_group=f"rg{rng.integers(1, 3)}",
                cycle=int(rng.integers(1, 6)),
                base="ACGT"[rng.integers(0, 4)],
                previous_base="ACGTN"[rng.integers(0, 5)],
                quality=int(rng.choice([20, 30])),
                is_mismatch=bool(rng.random() < 0.1),
            )
        )
    return residues


@pytest.fixture
def small_config(seed):
    """Small run configuration for fast tests."""
    return RecalConfig(
        run_id="test_run",
        seed=seed,
        covariates=["read_group", "quality", "cycle", "dinucleotide"],
        simulation=SimulationConfig(n_reads=40, read_length=20, read_groups=["rgA", "rgB"]),
    )


def make_residue(
    read_group="rg1",
    cycle=1,
    base="A",
    previous_base="C",
    quality=30,
    is_mismatch=False,
):
    """Create a test residue with specified parameters."""
    return Residue(
        read_group=read_group,
        cycle=cycle,
        base=base,
        previous_base=previous_base,
        quality=quality,
        is_mismatch=is_mismatch,
    )
