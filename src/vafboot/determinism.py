"""Fingerprints for checking that resampling runs are reproducible."""

from __future__ import annotations

import hashlib

import numpy as np

from .result import BootResult


def hash_array(array: np.ndarray, precision: int = 6) -> str:
    """Compute SHA256 hash of numpy array for determinism testing.

    Args:
        array: NumPy array to hash
        precision: Decimal precision for rounding (to avoid floating point noise)

    Returns:
        SHA256 hash as hexadecimal string
    """
    array = np.asarray(array)
    if array.dtype != np.float64:
        array = array.astype(np.float64)

    rounded = np.round(array, decimals=precision)
    return hashlib.sha256(np.ascontiguousarray(rounded).tobytes()).hexdigest()


def hash_result(result: BootResult, precision: int = 6) -> str:
    """Hash every matrix (with its sample and cluster labels) of a result."""
    digest = hashlib.sha256()
    for key in result:
        value = result[key]
        digest.update(key.encode())
        if hasattr(value, "columns"):
            digest.update("\t".join(value.columns).encode())
            value = value.to_numpy()
        digest.update(hash_array(value, precision).encode())
    return digest.hexdigest()
