"""
Bootstrap resampling models.

Each model turns a cluster's estimated parameters (or, for the
non-parametric model, its raw VAFs) into bootstrap means. A bootstrap
mean is the average of ``boot_size`` draws, where ``boot_size`` is the
number of variants in the cluster.

Example:
    >>> from vafboot.models import BootstrapModel
    >>> BootstrapModel("beta-binomial") is BootstrapModel.BETA_BINOMIAL
    True
"""

from __future__ import annotations

from enum import StrEnum
from typing import Callable, Dict, Optional

import numpy as np
from scipy import stats

from .exceptions import DegenerateClusterError, UnknownModelError
from .stats import ClusterStats, beta_shape_params

# Binomial models simulate this many reads per variant.
BINOMIAL_TRIALS = 100

# Upper bound on values drawn per block, so memory stays flat for big clusters.
_BLOCK_VALUES = 1_000_000


class BootstrapModel(StrEnum):
    """Statistical models available for bootstrap resampling.

    Attributes:
        NORMAL: Normal(mean, sd), unbounded
        NORMAL_TRUNCATED: Normal(mean, sd) truncated to [0, 1]
        BETA: Beta with method-of-moments shapes
        BINOMIAL: Binomial(100, mean) scaled back to a proportion
        BETA_BINOMIAL: Binomial(100, p) with p ~ Beta per draw
        NON_PARAMETRIC: resampling of the observed VAFs with replacement
    """

    NORMAL = "normal"
    NORMAL_TRUNCATED = "normal-truncated"
    BETA = "beta"
    BINOMIAL = "binomial"
    BETA_BINOMIAL = "beta-binomial"
    NON_PARAMETRIC = "non-parametric"

    @property
    def uses_dispersion(self) -> bool:
        """Whether the model is parameterized by the cluster's sd."""
        return self in (
            BootstrapModel.NORMAL,
            BootstrapModel.NORMAL_TRUNCATED,
            BootstrapModel.BETA,
            BootstrapModel.BETA_BINOMIAL,
        )


MODEL_NAMES = tuple(model.value for model in BootstrapModel)


def parse_model(name) -> BootstrapModel:
    """Resolve a model name, raising ``UnknownModelError`` when unsupported."""
    if isinstance(name, BootstrapModel):
        return name
    try:
        return BootstrapModel(name)
    except ValueError:
        raise UnknownModelError(
            f"Unknown bootstrap model {name!r}. Model can be "
            + ", ".join(repr(n) for n in MODEL_NAMES) + ".",
            {"model": name},
        ) from None


def _normal(rng, shape, params: ClusterStats, vafs, weights) -> np.ndarray:
    return rng.normal(loc=params.mean, scale=params.sd, size=shape)


def _normal_truncated(rng, shape, params: ClusterStats, vafs, weights) -> np.ndarray:
    if not params.sd > 0:
        raise DegenerateClusterError(
            f"truncated normal needs a positive sd, got {params.sd}",
            {"mean": params.mean, "sd": params.sd},
        )
    # truncnorm takes its bounds in standard units
    a = (0.0 - params.mean) / params.sd
    b = (1.0 - params.mean) / params.sd
    return stats.truncnorm.rvs(a, b, loc=params.mean, scale=params.sd, size=shape, random_state=rng)


def _beta(rng, shape, params: ClusterStats, vafs, weights) -> np.ndarray:
    alpha, beta = beta_shape_params(params)
    return rng.beta(alpha, beta, size=shape)


def _binomial(rng, shape, params: ClusterStats, vafs, weights) -> np.ndarray:
    if not 0.0 <= params.mean <= 1.0:
        raise DegenerateClusterError(
            f"binomial probability must lie in [0, 1], got {params.mean}",
            {"mean": params.mean},
        )
    return rng.binomial(BINOMIAL_TRIALS, params.mean, size=shape) / BINOMIAL_TRIALS


def _beta_binomial(rng, shape, params: ClusterStats, vafs, weights) -> np.ndarray:
    alpha, beta = beta_shape_params(params)
    probs = rng.beta(alpha, beta, size=shape)
    return rng.binomial(BINOMIAL_TRIALS, probs) / BINOMIAL_TRIALS


def _non_parametric(rng, shape, params: ClusterStats, vafs, weights) -> np.ndarray:
    if vafs is None:
        raise ValueError("non-parametric resampling needs the observed VAFs")
    vafs = np.asarray(vafs, dtype=np.float64)
    probs = None
    if weights is not None:
        weights = np.asarray(weights, dtype=np.float64)
        total = weights.sum()
        if total <= 0:
            raise DegenerateClusterError("cluster depth sum is zero")
        probs = weights / total
    return rng.choice(vafs, size=shape, replace=True, p=probs)


_Sampler = Callable[..., np.ndarray]

_SAMPLERS: Dict[BootstrapModel, _Sampler] = {
    BootstrapModel.NORMAL: _normal,
    BootstrapModel.NORMAL_TRUNCATED: _normal_truncated,
    BootstrapModel.BETA: _beta,
    BootstrapModel.BINOMIAL: _binomial,
    BootstrapModel.BETA_BINOMIAL: _beta_binomial,
    BootstrapModel.NON_PARAMETRIC: _non_parametric,
}


def draw_bootstrap_means(
    model: BootstrapModel,
    rng: np.random.Generator,
    n_draws: int,
    boot_size: int,
    params: ClusterStats,
    vafs: Optional[np.ndarray] = None,
    weights: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Draw ``n_draws`` bootstrap means from one model.

    Values are consumed from ``rng`` row by row in boot order, in blocks of
    at most ``_BLOCK_VALUES`` values, so the output depends only on the
    generator state and the inputs.

    Args:
        model: Resampling model
        rng: Generator owned by the caller for this cluster
        n_draws: Number of bootstrap means to produce
        boot_size: Values averaged per bootstrap mean
        params: Estimated cluster parameters
        vafs: Observed VAFs (non-parametric model only)
        weights: Optional resampling weights (non-parametric model only)

    Returns:
        Array of shape ``(n_draws,)``
    """
    sampler = _SAMPLERS[parse_model(model)]
    if boot_size < 1:
        raise DegenerateClusterError(f"boot_size must be positive, got {boot_size}")

    rows_per_block = max(1, _BLOCK_VALUES // boot_size)
    means = np.empty(n_draws, dtype=np.float64)
    for start in range(0, n_draws, rows_per_block):
        stop = min(start + rows_per_block, n_draws)
        block = sampler(rng, (stop - start, boot_size), params, vafs, weights)
        means[start:stop] = block.mean(axis=1)
    return means
