"""
Test configuration and fixtures for vafboot tests.
"""

import pytest
import numpy as np
import pandas as pd

from vafboot.rng import choose_rng


@pytest.fixture
def seed():
    """Fixed random seed for reproducible tests."""
    return 42


@pytest.fixture
def rng(seed):
    """Seeded random source."""
    return choose_rng(seed)


@pytest.fixture
def two_cluster_variants():
    """Two clusters, one sample column, VAFs as proportions."""
    return pd.DataFrame({
        "cluster": ["A", "A", "A", "B", "B", "B"],
        "s1": [0.10, 0.12, 0.11, 0.50, 0.48, 0.52],
    })


@pytest.fixture
def zero_cluster_variants():
    """Cluster Z has only zero VAFs in s1; cluster P is strictly positive."""
    return pd.DataFrame({
        "cluster": ["Z", "P", "Z", "P", "Z", "P"],
        "s1": [0.0, 0.30, 0.0, 0.32, 0.0, 0.28],
    })


@pytest.fixture
def weighted_variants():
    """Two samples with paired depth columns."""
    return pd.DataFrame({
        "cluster": [1, 1, 1, 1, 2, 2, 2],
        "s1_vaf": [0.20, 0.25, 0.22, 0.18, 0.45, 0.50, 0.40],
        "s2_vaf": [0.10, 0.12, 0.08, 0.11, 0.30, 0.35, 0.33],
        "s1_depth": [100, 80, 120, 90, 60, 150, 75],
        "s2_depth": [50, 70, 65, 90, 110, 95, 105],
    })


@pytest.fixture
def percent_variants():
    """VAFs given as percentages, three clusters across two samples."""
    generator = np.random.default_rng(0)
    clusters = np.repeat(["c1", "c2", "c3"], 20)
    centers = np.repeat([10.0, 30.0, 45.0], 20)
    return pd.DataFrame({
        "cluster": clusters,
        "tumor": np.clip(centers + generator.normal(0, 2, size=60), 0, 100),
        "relapse": np.clip(centers / 2 + generator.normal(0, 2, size=60), 0, 100),
    })
