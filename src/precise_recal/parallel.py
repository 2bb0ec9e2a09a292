"""Data-parallel table construction: one table per shard, then a tree reduce."""

from __future__ import annotations

import logging
import multiprocessing as mp
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Iterable, List, Sequence

from .logging_config import PerformanceLogger
from .residue import Residue
from .space import CovariateSpace
from .table import ObservationTable

logger = logging.getLogger(__name__)


def shard_residues(residues: Iterable[Residue], chunk_size: int = 10000) -> List[List[Residue]]:
    """Split residues into contiguous shards of at most ``chunk_size``."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    shards: List[List[Residue]] = []
    current: List[Residue] = []
    for residue in residues:
        current.append(residue)
        if len(current) == chunk_size:
            shards.append(current)
            current = []
    if current:
        shards.append(current)
    return shards


def tree_reduce(space: CovariateSpace, tables: Sequence[ObservationTable]) -> ObservationTable:
    """Merge tables pairwise in rounds.

    Left operands are merged into in place, so the input tables should be
    discarded afterwards.
    """
    level = list(tables)
    if not level:
        return ObservationTable.empty(space)
    while len(level) > 1:
        merged = []
        for i in range(0, len(level) - 1, 2):
            merged.append(level[i].merge_into(level[i + 1]))
        if len(level) % 2:
            merged.append(level[-1])
        level = merged
    # A single table from another space must still be rejected.
    return ObservationTable.empty(space).merge_into(level[0])


def _shard_worker(args):
    space, shard = args
    return ObservationTable.from_residues(space, shard)


def build_table_parallel(
    space: CovariateSpace,
    residues: Iterable[Residue],
    n_jobs: int = 1,
    chunk_size: int = 10000,
) -> ObservationTable:
    """Build an observation table over sharded residues.

    Args:
        space: Covariate space shared by every shard
        residues: Residues to aggregate
        n_jobs: Worker processes (-1 for all cores, 1 runs inline)
        chunk_size: Residues per shard

    Returns:
        The reduced table; identical for any ``n_jobs`` and ``chunk_size``
    """
    shards = shard_residues(residues, chunk_size)
    n_jobs = mp.cpu_count() if n_jobs == -1 else max(1, n_jobs)

    with PerformanceLogger(logger, f"building {len(shards)} shard tables with {n_jobs} job(s)"):
        if n_jobs == 1 or len(shards) <= 1:
            partials = [_shard_worker((space, shard)) for shard in shards]
        else:
            with ProcessPoolExecutor(max_workers=n_jobs) as executor:
                future_to_index = {
                    executor.submit(_shard_worker, (space, shard)): i
                    for i, shard in enumerate(shards)
                }
                # Collect in submission order so the reduction tree is fixed
                partials = [None] * len(shards)
                for future in as_completed(future_to_index):
                    partials[future_to_index[future]] = future.result()

    with PerformanceLogger(logger, f"reducing {len(partials)} partial tables", level=logging.DEBUG):
        table = tree_reduce(space, partials)
    logger.info(f"Aggregated {len(table)} covariate keys from {len(shards)} shard(s)")
    return table
