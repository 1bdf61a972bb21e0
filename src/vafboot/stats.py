"""
Cluster summary statistics used to parameterize the bootstrap models.

This module provides:
- Weighted and unweighted mean / standard deviation of cluster VAFs
- Method-of-moments beta shape parameters
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .exceptions import DegenerateClusterError


@dataclass(frozen=True)
class ClusterStats:
    """Estimated parameters for one (cluster, sample column) pair."""
    mean: float
    sd: float
    size: int
    weighted: bool = False

    @property
    def variance(self) -> float:
        return self.sd * self.sd


def estimate_cluster_stats(
    vafs: np.ndarray,
    depths: Optional[np.ndarray] = None,
    require_dispersion: bool = True,
) -> ClusterStats:
    """Compute mean and standard deviation of a cluster's VAFs.

    Without depths this is the arithmetic mean and the sample standard
    deviation (n - 1 denominator). With depths, each VAF is weighted by its
    read depth and the variance uses the unequal-weights correction
    ``sum(d) / (sum(d)**2 - sum(d**2))``, which reduces to the unweighted
    estimator when all depths are equal. A cluster whose VAFs are all equal
    gets exactly that VAF as its mean and an sd of exactly 0.

    Args:
        vafs: VAF proportions of the cluster members
        depths: Optional read depths paired with ``vafs``
        require_dispersion: Fail when the standard deviation is not finite

    Returns:
        ClusterStats for the cluster

    Raises:
        DegenerateClusterError: If the depth sum is zero, or the standard
            deviation is non-finite while ``require_dispersion`` is set
    """
    vafs = np.asarray(vafs, dtype=np.float64)
    size = int(vafs.size)
    if size == 0:
        raise DegenerateClusterError("cannot estimate statistics of an empty cluster")

    if depths is None:
        mean = float(vafs.mean())
        sd = float(vafs.std(ddof=1)) if size > 1 else float("nan")
    else:
        depths = np.asarray(depths, dtype=np.float64)
        if depths.shape != vafs.shape:
            raise DegenerateClusterError(
                "depth and VAF vectors differ in length",
                {"n_vafs": size, "n_depths": int(depths.size)},
            )
        total = depths.sum()
        if total == 0:
            raise DegenerateClusterError("cluster depth sum is zero")
        mean = float((depths * vafs).sum() / total)
        denom = total * total - (depths * depths).sum()
        with np.errstate(divide="ignore", invalid="ignore"):
            var = np.float64(total) / denom * (depths * (vafs - mean) ** 2).sum()
        sd = float(np.sqrt(var)) if var >= 0 else float("nan")

    # summation rounding must not turn a constant cluster into a tiny spread
    if np.ptp(vafs) == 0:
        mean = float(vafs[0])
        if np.isfinite(sd):
            sd = 0.0

    if require_dispersion and not np.isfinite(sd):
        raise DegenerateClusterError(
            f"standard deviation is not finite for a cluster of {size} variant(s)",
            {"mean": mean, "size": size},
        )

    return ClusterStats(mean=mean, sd=sd, size=size, weighted=depths is not None)


def beta_shape_params(stats: ClusterStats) -> Tuple[float, float]:
    """Method-of-moments (alpha, beta) for a Beta with the cluster's moments."""
    m = stats.mean
    var = stats.variance
    if not np.isfinite(var) or var <= 0:
        raise DegenerateClusterError(
            f"beta shape parameters need a positive variance, got {var}",
            {"mean": m, "variance": var},
        )

    common = (m - m * m) / var - 1
    alpha = m * common
    beta = (1 - m) * common
    if not (np.isfinite(alpha) and np.isfinite(beta)) or alpha <= 0 or beta <= 0:
        raise DegenerateClusterError(
            f"undefined beta shape parameters (alpha={alpha}, beta={beta}) "
            f"for mean={m}, variance={var}",
            {"mean": m, "variance": var, "alpha": alpha, "beta": beta},
        )
    return float(alpha), float(beta)
