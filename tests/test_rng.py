"""
Tests for the seeded random source.
"""

import dataclasses

import numpy as np
import pytest

from vafboot.exceptions import ConfigurationError
from vafboot.rng import RandomState, choose_rng


class TestRandomState:
    """Sub-stream derivation."""

    def test_spawn_is_deterministic(self):
        first = choose_rng(42).spawn(0, 1).random(5)
        second = choose_rng(42).spawn(0, 1).random(5)
        np.testing.assert_array_equal(first, second)

    def test_spawn_keys_differ(self):
        rng = choose_rng(42)
        assert not np.array_equal(rng.spawn(0, 1).random(5), rng.spawn(1, 0).random(5))

    def test_spawn_ignores_earlier_spawns(self):
        rng = choose_rng(7)
        before = rng.spawn(2, 3).random(3)
        rng.spawn(2, 3).random(100)
        np.testing.assert_array_equal(before, rng.spawn(2, 3).random(3))

    def test_state_is_only_the_seed(self):
        rng = choose_rng(7)
        assert [f.name for f in dataclasses.fields(rng)] == ["seed"]
        with pytest.raises(dataclasses.FrozenInstanceError):
            rng.seed = 8

    def test_unseeded_creation(self):
        rng = RandomState.create()
        assert rng.seed >= 0

    def test_negative_seed(self):
        with pytest.raises(ConfigurationError):
            choose_rng(-1)

    @pytest.mark.parametrize("seed", ["7", 1.5, True])
    def test_non_integer_seed(self, seed):
        with pytest.raises(ConfigurationError, match="integer"):
            choose_rng(seed)
