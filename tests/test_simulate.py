"""
Tests for residue simulation and residue schema handling.
"""

import numpy as np
import pandas as pd
import pytest

from precise_recal.exceptions import ValidationError
from precise_recal.residue import Residue, residues_from_frame
from precise_recal.schemas import RESIDUE_SCHEMA
from precise_recal.simulate import simulate_residues


def test_simulated_shape(small_config):
    frame = simulate_residues(small_config, np.random.default_rng(small_config.seed))
    sim = small_config.simulation
    assert len(frame) == sim.n_reads * sim.read_length
    assert list(frame.columns) == list(RESIDUE_SCHEMA.schema.names())
    assert set(frame["read_group"]) <= set(sim.read_groups)
    assert frame["cycle"].min() == 1
    assert frame["cycle"].max() == sim.read_length
    assert frame["quality"].between(2, 41).all()


def test_first_cycle_has_no_previous_base(small_config):
    frame = simulate_residues(small_config, np.random.default_rng(1))
    assert (frame.loc[frame["cycle"] == 1, "previous_base"] == "N").all()
    assert frame.loc[frame["cycle"] > 1, "previous_base"].isin(list("ACGT")).all()


def test_simulation_is_deterministic(small_config):
    first = simulate_residues(small_config, np.random.default_rng(5))
    second = simulate_residues(small_config, np.random.default_rng(5))
    pd.testing.assert_frame_equal(first, second)


def test_residues_from_frame(small_config):
    frame = simulate_residues(small_config, np.random.default_rng(2))
    residues = list(residues_from_frame(frame))
    assert len(residues) == len(frame)
    first = residues[0]
    assert isinstance(first, Residue)
    assert first.cycle == 1
    assert first.is_snp == bool(frame["is_mismatch"].iloc[0])


def test_residue_schema_missing_column():
    frame = pd.DataFrame({"read_group": ["rg1"], "cycle": [1]})
    with pytest.raises(ValidationError):
        list(residues_from_frame(frame))
