"""Command-line interface for vafboot."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import click

from .config import RunConfig, dump_config, load_config
from .config_validator import ConfigValidator, validate_config_file
from .determinism import hash_result
from .engine import run_bootstrap
from .exceptions import VafBootError
from .logging_config import get_logger, log_system_info, setup_logging
from .models import MODEL_NAMES
from .rng import RandomState
from .utils import ResultIO, read_variants
from .validation import validate_variants

DEFAULT_SEED = 7


@dataclass(slots=True)
class CLIContext:
    """Shared CLI configuration."""

    seed: Optional[int]
    config_path: Optional[Path]


def _load_run_config(config_path: Optional[Path], seed: Optional[int]) -> RunConfig:
    """Load a run configuration, falling back to defaults when none is given."""
    if config_path is None:
        config = RunConfig(run_id="vafboot", seed=DEFAULT_SEED)
    else:
        if not config_path.exists():
            raise click.ClickException(f"Configuration file not found: {config_path}")
        try:
            config = load_config(config_path)
        except VafBootError as exc:
            raise click.ClickException(f"Failed to load configuration {config_path}: {exc}") from exc
    if seed is not None:
        config.seed = seed
    return config


def _parse_zero_sample(raw: Optional[str]) -> Optional[list[float]]:
    if raw is None:
        return None
    try:
        return [float(v) for v in raw.split(",") if v.strip()]
    except ValueError as exc:
        raise click.BadParameter(f"expected comma-separated numbers: {exc}", param_hint="--zero-sample")


@click.group()
@click.option("--seed", default=None, type=int, help=f"Seed for deterministic runs [default: config seed or {DEFAULT_SEED}].")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Path to a YAML run configuration.",
)
@click.option("--log-level", default="INFO", show_default=True, help="Logging level.")
@click.pass_context
def main(ctx: click.Context, seed: Optional[int], config_path: Optional[Path], log_level: str) -> None:
    """vafboot: bootstrap distributions of cluster-mean VAFs."""
    setup_logging(level=log_level)
    ctx.obj = CLIContext(seed=seed, config_path=config_path)


@main.command("run")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--out-dir", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory.")
@click.option("--cluster-col", default=None, help="Cluster column name.")
@click.option("--vaf-col", "vaf_cols", multiple=True, help="VAF column (repeatable).")
@click.option("--depth-col", "depth_cols", multiple=True, help="Depth column (repeatable), paired with --vaf-col.")
@click.option("--model", type=click.Choice(MODEL_NAMES), default=None, help="Bootstrap model.")
@click.option("--num-boots", type=click.IntRange(min=1), default=None, help="Bootstrap means per cluster.")
@click.option("--weighted/--unweighted", default=None, help="Weight variants by read depth.")
@click.option("--vaf-in-percent/--vaf-as-proportion", default=None, help="Whether VAFs are percentages.")
@click.option("--zero-sample", default=None, help="Comma-separated VAFs replacing the detected zero pool.")
@click.option("--jobs", "n_jobs", type=int, default=None, help="Worker processes (-1 for all cores).")
@click.pass_obj
def run_cmd(
    ctx: CLIContext,
    input_path: Path,
    out_dir: Path,
    cluster_col: Optional[str],
    vaf_cols: Tuple[str, ...],
    depth_cols: Tuple[str, ...],
    model: Optional[str],
    num_boots: Optional[int],
    weighted: Optional[bool],
    vaf_in_percent: Optional[bool],
    zero_sample: Optional[str],
    n_jobs: Optional[int],
) -> None:
    """Bootstrap cluster-mean VAFs for every sample column of INPUT_PATH."""
    config = _load_run_config(ctx.config_path, ctx.seed)
    columns, boot = config.columns, config.bootstrap

    if cluster_col is not None:
        columns.cluster = cluster_col
    if vaf_cols:
        columns.vaf = list(vaf_cols)
    if depth_cols:
        columns.depth = list(depth_cols)
    if vaf_in_percent is not None:
        columns.vaf_in_percent = vaf_in_percent
    if model is not None:
        boot.model = model
    if num_boots is not None:
        boot.num_boots = num_boots
    if weighted is not None:
        boot.weighted = weighted
    if zero_sample is not None:
        boot.zero_sample = _parse_zero_sample(zero_sample)
    if n_jobs is not None:
        boot.n_jobs = n_jobs

    is_valid, errors, _ = ConfigValidator().validate_config(config.to_dict())
    if not is_valid:
        raise click.ClickException("Invalid run configuration: " + "; ".join(errors))

    log_system_info(get_logger())

    try:
        variants = read_variants(input_path)
        table = validate_variants(
            variants,
            cluster_col=columns.cluster,
            vaf_cols=columns.vaf,
            depth_cols=columns.depth,
            vaf_in_percent=columns.vaf_in_percent,
            bootstrap_model=boot.model,
            weighted=boot.weighted,
        )
        result = run_bootstrap(
            table,
            boot.model,
            num_boots=boot.num_boots,
            zero_sample=boot.zero_sample,
            rng=RandomState.create(config.seed),
            n_jobs=boot.n_jobs,
        )
    except VafBootError as exc:
        raise click.ClickException(str(exc)) from exc

    io = ResultIO(out_dir)
    dump_config(config, io.path("config"))
    artifacts = io.write_result(result) if result is not None else []
    context = {
        "run_id": config.run_id,
        "seed": config.seed,
        "config_hash": config.config_hash(),
        "input": str(input_path),
        "model": boot.model,
        "num_boots": boot.num_boots,
        "samples": result.samples if result is not None else [],
        "zero_means": result is not None and result.zero_means is not None,
        "result_hash": hash_result(result) if result is not None else None,
    }
    io.write_json("run_context", context)

    click.echo(
        json.dumps(
            {
                "stage": "run",
                "seed": config.seed,
                "artifacts": [str(p) for p in artifacts],
                "result_hash": context["result_hash"],
            },
            indent=2,
        )
    )


@main.command("validate-config")
@click.argument("config_file", type=click.Path(path_type=Path))
def validate_config_cmd(config_file: Path) -> None:
    """Check a YAML run configuration and report errors and warnings."""
    try:
        is_valid, errors, warnings = validate_config_file(config_file)
    except VafBootError as exc:
        raise click.ClickException(str(exc)) from exc

    for warning in warnings:
        click.echo(f"warning: {warning}")
    for error in errors:
        click.echo(f"error: {error}")
    if not is_valid:
        raise click.ClickException(f"{len(errors)} configuration error(s) in {config_file}")
    click.echo(f"{config_file}: OK")


@main.command("models")
def models_cmd() -> None:
    """List the available bootstrap models."""
    for name in MODEL_NAMES:
        click.echo(name)


def cli() -> None:  # pragma: no cover - convenience shim
    """Entry point for console_scripts."""
    main(standalone_mode=True)


if __name__ == "__main__":  # pragma: no cover
    cli()
