"""Zero-VAF cluster detection and the background pool it feeds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np


def is_zero_cluster(vafs: np.ndarray) -> bool:
    """A cluster whose median VAF is exactly 0 is treated as true VAF = 0."""
    return bool(np.median(np.asarray(vafs, dtype=np.float64)) == 0)


@dataclass(frozen=True)
class ZeroPool:
    """Immutable snapshot of VAFs pooled from zero-median clusters."""

    values: Tuple[float, ...] = ()

    def add(self, vafs: np.ndarray) -> "ZeroPool":
        if not is_zero_cluster(vafs):
            return self
        return ZeroPool(self.values + tuple(float(v) for v in np.asarray(vafs).ravel()))

    @classmethod
    def merge(cls, pools: Iterable["ZeroPool"]) -> "ZeroPool":
        values: Tuple[float, ...] = ()
        for pool in pools:
            values += pool.values
        return cls(values)

    def resolve(self, override: Optional[Sequence[float]] = None) -> "ZeroPool":
        """Return the override pool when one is supplied, else this pool."""
        if override is not None:
            return ZeroPool(tuple(float(v) for v in override))
        return self

    def as_array(self) -> np.ndarray:
        return np.asarray(self.values, dtype=np.float64)

    def __len__(self) -> int:
        return len(self.values)
