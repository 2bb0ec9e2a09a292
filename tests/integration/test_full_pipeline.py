"""Integration tests: simulate residues, build sharded tables, persist and reload."""

import numpy as np
import pytest

from precise_recal.io import RecalIO, read_residue_frame, read_table
from precise_recal.parallel import build_table_parallel, tree_reduce
from precise_recal.residue import residues_from_frame
from precise_recal.simulate import simulate_residues
from precise_recal.table import ObservationTable


@pytest.fixture
def simulated(small_config):
    frame = simulate_residues(small_config, np.random.default_rng(small_config.seed))
    return frame, list(residues_from_frame(frame))


def test_sharded_build_matches_single_table(small_config, simulated):
    _, residues = simulated
    space = small_config.space()
    single = ObservationTable.from_residues(space, residues)
    sharded = build_table_parallel(space, residues, n_jobs=2, chunk_size=97)
    assert sharded == single
    assert sharded.total_observation().total == len(residues)


def test_reduction_order_does_not_matter(small_config, simulated):
    _, residues = simulated
    space = small_config.space()
    shards = [residues[i::5] for i in range(5)]

    forward = tree_reduce(space, [ObservationTable.from_residues(space, s) for s in shards])
    backward = tree_reduce(space, [ObservationTable.from_residues(space, s) for s in reversed(shards)])
    sequential = ObservationTable.empty(space)
    for shard in shards:
        sequential.merge_into(ObservationTable.from_residues(space, shard))

    assert forward.fingerprint() == backward.fingerprint() == sequential.fingerprint()


def test_persist_and_reload(small_config, simulated, temp_dir):
    frame, residues = simulated
    io = RecalIO(temp_dir)
    io.write_parquet("residues", frame)
    reloaded_frame = read_residue_frame(io.path("residues"))
    space = small_config.space()
    table = ObservationTable.from_residues(space, residues_from_frame(reloaded_frame))

    artifacts = io.write_table(table, small_config.estimator)
    restored = read_table(artifacts["table_parquet"], space)
    assert restored == table
    assert artifacts["table_tsv"].read_text().rstrip("\n") == table.render(sorted_order=True)


def test_tsv_residue_input(small_config, simulated, temp_dir):
    frame, residues = simulated
    path = temp_dir / "residues.tsv"
    frame.to_csv(path, sep="\t", index=False)
    space = small_config.space()
    from_tsv = ObservationTable.from_residues(space, residues_from_frame(read_residue_frame(path)))
    assert from_tsv == ObservationTable.from_residues(space, residues)


def test_read_table_missing_file(small_config, temp_dir):
    with pytest.raises(FileNotFoundError):
        read_table(temp_dir / "absent.parquet", small_config.space())
