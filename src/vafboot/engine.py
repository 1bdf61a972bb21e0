"""
Bootstrap resampling engine.

For every sample column and every cluster, the engine estimates the
cluster's statistics, records zero-median clusters, and draws ``num_boots``
bootstrap means from the selected model. Each (sample, cluster) pair uses
its own generator derived from the run seed, so results do not depend on
scheduling or on the number of worker processes.
"""

from __future__ import annotations

import logging
import multiprocessing as mp
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .exceptions import ConfigurationError, RangeError
from .logging_config import time_it
from .models import BootstrapModel, draw_bootstrap_means, parse_model
from .result import BootResult, assemble_result, boot_matrix
from .rng import RandomState
from .stats import estimate_cluster_stats
from .validation import VariantTable, validate_variants
from .zeros import ZeroPool

logger = logging.getLogger(__name__)

# (label, vafs, depths or None) for one sample column
_ClusterData = Tuple[str, np.ndarray, Optional[np.ndarray]]


def _bootstrap_sample(args) -> Tuple[pd.DataFrame, ZeroPool]:
    """Worker: bootstrap every cluster of one sample column."""
    sample_index, clusters, model, num_boots, seed = args
    rng = RandomState.create(seed)

    columns = {}
    pool = ZeroPool()
    for cluster_index, (label, vafs, depths) in enumerate(clusters):
        params = estimate_cluster_stats(vafs, depths, require_dispersion=model.uses_dispersion)
        pool = pool.add(vafs)
        columns[label] = draw_bootstrap_means(
            model,
            rng.spawn(sample_index, cluster_index),
            num_boots,
            params.size,
            params,
            vafs=vafs,
            weights=depths,
        )
    return boot_matrix(columns, num_boots), pool


def _sample_payload(table: VariantTable, vaf_col: str) -> List[_ClusterData]:
    depth_col = table.depth_col_for(vaf_col)
    payload = []
    for label, rows in table.cluster_groups():
        vafs = rows[vaf_col].to_numpy(dtype=np.float64)
        depths = rows[depth_col].to_numpy(dtype=np.float64) if depth_col is not None else None
        payload.append((label, vafs, depths))
    return payload


def _check_num_boots(num_boots) -> int:
    if isinstance(num_boots, bool) or not isinstance(num_boots, (int, np.integer)) or num_boots < 1:
        raise ConfigurationError(
            f"num_boots must be a positive integer, got {num_boots!r}",
            {"num_boots": num_boots},
        )
    return int(num_boots)


def _check_zero_sample(zero_sample) -> Optional[List[float]]:
    if zero_sample is None:
        return None
    try:
        values = np.asarray(zero_sample, dtype=np.float64).ravel()
    except (TypeError, ValueError) as exc:
        raise RangeError(f"zero_sample must contain numeric VAFs: {exc}") from exc
    bad = ~np.isfinite(values) | (values < 0) | (values > 1)
    if bad.any():
        raise RangeError(
            "zero_sample VAFs must be finite and between 0 and 1",
            {"invalid": values[bad].tolist()},
        )
    return values.tolist()


@time_it("bootstrap resampling")
def run_bootstrap(
    table: VariantTable,
    model: Union[str, BootstrapModel],
    num_boots: int = 1000,
    zero_sample: Optional[Sequence[float]] = None,
    rng: Optional[RandomState] = None,
    n_jobs: int = 1,
) -> Optional[BootResult]:
    """Generate bootstrap means for all clusters of a validated table.

    Args:
        table: Validated variants
        model: Bootstrap model name or member
        num_boots: Bootstrap means drawn per (sample, cluster)
        zero_sample: Optional VAFs replacing the detected zero pool
        rng: Random source; a fresh unseeded one is created when omitted
        n_jobs: Worker processes for sample columns (-1 for all cores)

    Returns:
        BootResult, or None when the table has no clusters or no samples

    Raises:
        UnknownModelError: If ``model`` is not a supported model
        ConfigurationError: If ``num_boots`` is not a positive integer
        RangeError: If ``zero_sample`` holds non-numeric, non-finite or
            out-of-range VAFs
        DegenerateClusterError: If a cluster cannot parameterize the model
    """
    model = parse_model(model)
    num_boots = _check_num_boots(num_boots)
    zero_sample = _check_zero_sample(zero_sample)

    if table.is_empty:
        return None
    if rng is None:
        rng = RandomState.create()

    samples = [str(col) for col in table.vaf_cols]
    n_clusters = len(table.clusters)
    logger.info(
        f"Generating {model.value} bootstrap samples: {len(samples)} sample(s), "
        f"{n_clusters} cluster(s), {num_boots} boots, weighted={table.weighted}"
    )

    tasks = [
        (i, _sample_payload(table, vaf_col), model, num_boots, rng.seed)
        for i, vaf_col in enumerate(table.vaf_cols)
    ]

    n_jobs = mp.cpu_count() if n_jobs == -1 else max(1, int(n_jobs))
    n_jobs = min(n_jobs, len(tasks))
    if n_jobs == 1:
        outputs = [_bootstrap_sample(task) for task in tasks]
    else:
        with ProcessPoolExecutor(max_workers=n_jobs) as executor:
            # map keeps submission order
            outputs = list(executor.map(_bootstrap_sample, tasks))

    matrices = [matrix for matrix, _ in outputs]
    pool = ZeroPool.merge(p for _, p in outputs)

    return assemble_result(
        samples,
        matrices,
        pool,
        model,
        num_boots,
        rng.spawn(len(samples)),
        zero_sample=zero_sample,
    )


def generate_boot(
    variants: pd.DataFrame,
    cluster_col: Optional[str] = "cluster",
    vaf_cols: Optional[Sequence[str]] = None,
    depth_cols: Optional[Sequence[str]] = None,
    vaf_in_percent: bool = True,
    num_boots: int = 1000,
    bootstrap_model: Optional[str] = "non-parametric",
    weighted: bool = False,
    zero_sample: Optional[Sequence[float]] = None,
    seed: Optional[int] = None,
    n_jobs: int = 1,
) -> Optional[BootResult]:
    """Validate a variants table and generate bootstrap means for all clusters.

    Example:
        >>> result = generate_boot(df, vaf_cols=["s1"], vaf_in_percent=False, seed=7)
        >>> result["s1"].shape
        (1000, 2)
    """
    table = validate_variants(
        variants,
        cluster_col=cluster_col,
        vaf_cols=vaf_cols,
        depth_cols=depth_cols,
        vaf_in_percent=vaf_in_percent,
        bootstrap_model=bootstrap_model,
        weighted=weighted,
    )
    return run_bootstrap(
        table,
        bootstrap_model,
        num_boots=num_boots,
        zero_sample=zero_sample,
        rng=RandomState.create(seed),
        n_jobs=n_jobs,
    )
