"""Synthetic residue generation for smoke runs and tests."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from .config import RecalConfig, SimulationConfig
from .logging_config import time_it
from .quality import MAX_PHRED_SCORE
from .schemas import RESIDUE_SCHEMA

logger = logging.getLogger(__name__)

BASES = np.array(list("ACGT"))


@time_it("simulate residues", level=logging.INFO)
def simulate_residues(config: RecalConfig, rng: np.random.Generator) -> pd.DataFrame:
    """Simulate aligned residues with quality-dependent mismatches.

    Each read contributes ``read_length`` residues. Reported qualities are
    drawn around ``mean_quality``; the true error rate is the reported one
    inflated linearly with sequencing cycle, so recalibration has something
    to find.

    Args:
        config: Run configuration; ``config.simulation`` defaults are used if unset
        rng: Seeded random number generator

    Returns:
        DataFrame following ``RESIDUE_SCHEMA``
    """
    sim = config.simulation or SimulationConfig()
    n_reads, length = sim.n_reads, sim.read_length
    n_residues = n_reads * length

    read_groups = np.asarray(sim.read_groups)[rng.integers(0, len(sim.read_groups), n_reads)]
    cycles = np.tile(np.arange(1, length + 1), n_reads)

    bases = BASES[rng.integers(0, 4, size=(n_reads, length))]
    previous = np.full((n_reads, length), "N", dtype="<U1")
    previous[:, 1:] = bases[:, :-1]

    qualities = np.clip(np.rint(rng.normal(sim.mean_quality, sim.quality_sd, n_residues)), 2, 41).astype(np.int64)
    reported_error = 10.0 ** (-qualities / 10.0)
    true_error = np.clip(reported_error * (1.0 + sim.cycle_error_slope * (cycles - 1)),
                         10.0 ** (-MAX_PHRED_SCORE / 10.0), 0.75)
    is_mismatch = rng.random(n_residues) < true_error

    frame = pd.DataFrame({
        "read_group": np.repeat(read_groups, length),
        "cycle": cycles.astype(np.int64),
        "base": bases.ravel(),
        "previous_base": previous.ravel(),
        "quality": qualities,
        "is_mismatch": is_mismatch,
    })
    RESIDUE_SCHEMA.validate(frame)
    logger.info(f"Simulated {n_residues:,} residues from {n_reads:,} reads "
                f"({int(is_mismatch.sum()):,} mismatches)")
    return frame
