"""Command-line interface for precise-recal."""

from __future__ import annotations

import json
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import click
import numpy as np

from . import __version__
from .config import RecalConfig, create_default_config, load_config
from .exceptions import PreciseRecalError
from .io import RecalIO, read_residue_frame, read_table
from .logging_config import setup_logging
from .parallel import build_table_parallel
from .residue import residues_from_frame
from .simulate import simulate_residues
from .table import ObservationTable

DATA_ROOT = Path("data")


@dataclass(slots=True)
class CLIContext:
    """Shared CLI configuration."""

    seed: int
    config_override: Optional[Path]


def _load_run_config(config_option: Optional[Path], seed: int) -> RecalConfig:
    """Load a run configuration, falling back to the built-in defaults."""
    if config_option is None:
        return create_default_config(seed)
    config_path = Path(config_option)
    if not config_path.exists():
        raise click.ClickException(f"Configuration file not found: {config_path}")
    try:
        config = load_config(config_path)
    except (PreciseRecalError, OSError) as exc:
        raise click.ClickException(f"Failed to load configuration {config_path}: {exc}") from exc
    config.seed = seed
    return config


def _emit(payload: dict) -> None:
    click.echo(json.dumps(payload, indent=2))


@click.group()
@click.version_option(__version__, prog_name="precise-recal")
@click.option("--seed", default=7, show_default=True, type=int, help="Seed for deterministic runs.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Path to a run configuration file. Defaults to the built-in configuration.",
)
@click.option("--log-level", default="WARNING", show_default=True, help="Logging level.")
@click.pass_context
def main(ctx: click.Context, seed: int, config_path: Optional[Path], log_level: str) -> None:
    """Precise recal: base-quality recalibration tables from aligned residues."""
    setup_logging(level=log_level)
    ctx.obj = CLIContext(seed=seed, config_override=config_path)


@main.command("simulate")
@click.option(
    "--out-dir",
    default=DATA_ROOT / "simulated",
    show_default=True,
    type=click.Path(path_type=Path),
    help="Directory for the simulated residues.",
)
@click.pass_obj
def simulate_cmd(ctx: CLIContext, out_dir: Path) -> None:
    """Simulate residues with cycle-dependent errors."""
    config = _load_run_config(ctx.config_override, ctx.seed)
    rng = np.random.default_rng(config.seed)
    frame = simulate_residues(config, rng)
    path = RecalIO(out_dir).write_parquet("residues", frame)
    _emit({"stage": "simulate", "seed": config.seed, "residues": len(frame), "path": str(path)})


@main.command("build")
@click.option("--residues", "residues_path", required=True, type=click.Path(path_type=Path),
              help="Residue table (parquet, csv or tsv).")
@click.option(
    "--out-dir",
    default=DATA_ROOT / "recal",
    show_default=True,
    type=click.Path(path_type=Path),
    help="Directory for the recalibration table.",
)
@click.option("--n-jobs", type=int, default=None, help="Worker processes; overrides the config.")
@click.pass_obj
def build_cmd(ctx: CLIContext, residues_path: Path, out_dir: Path, n_jobs: Optional[int]) -> None:
    """Aggregate residues into a recalibration table."""
    config = _load_run_config(ctx.config_override, ctx.seed)
    try:
        frame = read_residue_frame(residues_path)
        space = config.space()
        table = build_table_parallel(
            space,
            residues_from_frame(frame),
            n_jobs=n_jobs if n_jobs is not None else config.parallel.n_jobs,
            chunk_size=config.parallel.chunk_size,
        )
    except (PreciseRecalError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc

    io = RecalIO(out_dir)
    artifacts = io.write_table(table, config.estimator)
    totals = table.total_observation()
    run_context = {
        "schema_version": "1.0.0",
        "run_id": config.run_id,
        "seed": config.seed,
        "config_hash": config.config_hash(),
        "covariates": list(space.names),
        "residues": totals.total,
        "mismatches": totals.mismatches,
        "keys": len(table),
        "table_fingerprint": table.fingerprint(),
        "python": platform.python_version(),
        "numpy": np.__version__,
    }
    artifacts["run_context"] = io.write_json("run_context", run_context)
    artifacts["config"] = io.write_json("config", config.to_dict())
    _emit({
        "stage": "build",
        "keys": len(table),
        "overall": str(totals),
        "artifacts": {key: str(path) for key, path in artifacts.items()},
    })


@main.command("merge")
@click.argument("tables", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--output", required=True, type=click.Path(path_type=Path),
              help="Directory for the merged table.")
@click.pass_obj
def merge_cmd(ctx: CLIContext, tables: Tuple[Path, ...], output: Path) -> None:
    """Merge persisted tables built with the same covariates."""
    config = _load_run_config(ctx.config_override, ctx.seed)
    space = config.space()
    merged = ObservationTable.empty(space)
    try:
        for path in tables:
            merged.merge_into(read_table(path, space))
    except (PreciseRecalError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc
    artifacts = RecalIO(output).write_table(merged, config.estimator)
    _emit({
        "stage": "merge",
        "inputs": [str(path) for path in tables],
        "keys": len(merged),
        "table_fingerprint": merged.fingerprint(),
        "artifacts": {key: str(path) for key, path in artifacts.items()},
    })


@main.command("show")
@click.argument("table_path", type=click.Path(path_type=Path))
@click.option("--sorted/--unsorted", "sorted_order", default=True, show_default=True,
              help="Order entries by covariate key or keep stored order.")
@click.pass_obj
def show_cmd(ctx: CLIContext, table_path: Path, sorted_order: bool) -> None:
    """Print one line per table entry: key, mismatches / total (quality)."""
    config = _load_run_config(ctx.config_override, ctx.seed)
    try:
        table = read_table(table_path, config.space())
    except (PreciseRecalError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(table.render(sorted_order=sorted_order))


if __name__ == "__main__":  # pragma: no cover
    main()
