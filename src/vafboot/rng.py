"""Deterministic random utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class RandomState:
    """Seeded random source that hands out independent sub-streams.

    Workers never share a generator: each (sample, cluster) pair asks for
    ``spawn(sample_index, cluster_index)`` and gets a fresh generator whose
    stream depends only on the base seed and that key.
    """

    seed: int

    @classmethod
    def create(cls, seed: Optional[int] = None) -> "RandomState":
        if seed is None:
            seed = int(np.random.SeedSequence().entropy % (2**63))
        if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
            raise ConfigurationError(f"seed must be an integer, got {seed!r}")
        if seed < 0:
            raise ConfigurationError(f"seed must be non-negative, got {seed}")
        return cls(seed=int(seed))

    def spawn(self, *key: int) -> np.random.Generator:
        """Derive a child generator keyed by a tuple of non-negative ints."""

        sequence = np.random.SeedSequence(self.seed, spawn_key=tuple(int(k) for k in key))
        return np.random.default_rng(sequence)


def choose_rng(seed: Optional[int] = None) -> RandomState:
    """Convenience helper to create a ``RandomState``."""

    return RandomState.create(seed)
