"""Assembly of per-sample bootstrap matrices into the final result."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Dict, Iterator, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .models import BootstrapModel, draw_bootstrap_means
from .stats import ClusterStats
from .zeros import ZeroPool

logger = logging.getLogger(__name__)

ZERO_MEANS_KEY = "zero.means"


def boot_matrix(columns: Dict[str, np.ndarray], num_boots: int) -> pd.DataFrame:
    """Build a [num_boots x clusters] frame indexed by boot 1..num_boots."""
    index = pd.RangeIndex(1, num_boots + 1, name="boot")
    frame = pd.DataFrame(columns, index=index, dtype=np.float64)
    frame.columns = pd.Index([str(c) for c in frame.columns], name="cluster")
    return frame


class BootResult(Mapping):
    """Bootstrap means per sample column, plus the optional zero background.

    Behaves as a read-only mapping: sample names map to their
    ``pandas.DataFrame`` matrix and ``"zero.means"``, when present, maps to
    the zero-background vector.
    """

    def __init__(
        self,
        boot_means: Dict[str, pd.DataFrame],
        zero_means: Optional[np.ndarray],
        model: BootstrapModel,
        num_boots: int,
    ) -> None:
        self._boot_means = dict(boot_means)
        self._zero_means = zero_means
        self.model = model
        self.num_boots = num_boots

    @property
    def samples(self) -> List[str]:
        return list(self._boot_means)

    @property
    def zero_means(self) -> Optional[np.ndarray]:
        return self._zero_means

    def __getitem__(self, key: str) -> Union[pd.DataFrame, np.ndarray]:
        if key == ZERO_MEANS_KEY and self._zero_means is not None:
            return self._zero_means
        return self._boot_means[key]

    def __iter__(self) -> Iterator[str]:
        yield from self._boot_means
        if self._zero_means is not None:
            yield ZERO_MEANS_KEY

    def __len__(self) -> int:
        return len(self._boot_means) + (self._zero_means is not None)

    def __repr__(self) -> str:
        return (
            f"BootResult(model={self.model.value!r}, num_boots={self.num_boots}, "
            f"samples={self.samples}, zero_means={self._zero_means is not None})"
        )

    def to_dict(self) -> Dict[str, Union[pd.DataFrame, np.ndarray]]:
        return {key: self[key] for key in self}

    def summary(self) -> pd.DataFrame:
        """Mean and sd of the bootstrap means for every sample and cluster."""
        rows = []
        for sample, frame in self._boot_means.items():
            for cluster in frame.columns:
                column = frame[cluster]
                rows.append({
                    "sample": sample,
                    "cluster": cluster,
                    "boot_mean": float(column.mean()),
                    "boot_sd": float(column.std(ddof=1)) if len(column) > 1 else float("nan"),
                })
        if self._zero_means is not None:
            rows.append({
                "sample": ZERO_MEANS_KEY,
                "cluster": "",
                "boot_mean": float(self._zero_means.mean()),
                "boot_sd": float(self._zero_means.std(ddof=1)) if len(self._zero_means) > 1 else float("nan"),
            })
        return pd.DataFrame(rows, columns=["sample", "cluster", "boot_mean", "boot_sd"])


def bootstrap_zero_pool(pool: ZeroPool, num_boots: int, rng: np.random.Generator) -> Optional[np.ndarray]:
    """Non-parametric, unweighted bootstrap of the zero pool, or None if empty."""
    if len(pool) == 0:
        return None
    values = pool.as_array()
    params = ClusterStats(mean=float(values.mean()), sd=float("nan"), size=len(values))
    return draw_bootstrap_means(
        BootstrapModel.NON_PARAMETRIC, rng, num_boots, len(values), params, vafs=values
    )


def assemble_result(
    samples: Sequence[str],
    matrices: Sequence[pd.DataFrame],
    pool: ZeroPool,
    model: BootstrapModel,
    num_boots: int,
    rng: np.random.Generator,
    zero_sample: Optional[Sequence[float]] = None,
) -> BootResult:
    """Package sample matrices and the zero background into a ``BootResult``."""
    resolved = pool.resolve(zero_sample)
    if zero_sample is not None:
        logger.info(f"Using caller-supplied zero sample ({len(resolved)} values)")
    elif len(resolved):
        logger.info(f"Detected {len(resolved)} zero-VAF observations")
    zero_means = bootstrap_zero_pool(resolved, num_boots, rng)
    return BootResult(dict(zip(samples, matrices)), zero_means, model, num_boots)
