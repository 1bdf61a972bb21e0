"""Utility helpers for reading variants and persisting results."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from .result import ZERO_MEANS_KEY, BootResult


ARTIFACT_FILENAMES = {
    "boot_means": "boot_means_{sample}.parquet",
    "zero_means": "zero_means.parquet",
    "summary": "summary.csv",
    "config": "config.yaml",
    "run_context": "run_context.json",
}


def _safe_name(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", name)


class ResultIO:
    """Helper for writing resampling artifacts with deterministic paths."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def path(self, key: str, **fields: str) -> Path:
        if key not in ARTIFACT_FILENAMES:
            msg = f"unknown artifact key: {key}"
            raise KeyError(msg)
        name = ARTIFACT_FILENAMES[key].format(**{k: _safe_name(v) for k, v in fields.items()})
        return self.base_dir / name

    def write_result(self, result: BootResult) -> list[Path]:
        """Write one parquet per sample matrix plus the zero background."""
        written = []
        for sample in result.samples:
            path = self.path("boot_means", sample=sample)
            result[sample].to_parquet(path)
            written.append(path)
        if result.zero_means is not None:
            path = self.path("zero_means")
            frame = pd.DataFrame(
                {ZERO_MEANS_KEY: result.zero_means},
                index=pd.RangeIndex(1, len(result.zero_means) + 1, name="boot"),
            )
            frame.to_parquet(path)
            written.append(path)
        summary_path = self.path("summary")
        result.summary().to_csv(summary_path, index=False)
        written.append(summary_path)
        return written

    def read_boot_means(self, sample: str) -> pd.DataFrame:
        return pd.read_parquet(self.path("boot_means", sample=sample))

    def write_json(self, key: str, payload: dict[str, Any]) -> Path:
        path = self.path(key)
        path.write_text(json.dumps(as_json_ready(payload), indent=2, sort_keys=True), encoding="utf-8")
        return path


def read_variants(path: str | Path) -> pd.DataFrame:
    """Read a variants table; ``.csv`` is comma separated, anything else tab."""
    path = Path(path)
    suffixes = [s.lower() for s in path.suffixes]
    sep = "," if ".csv" in suffixes else "\t"
    return pd.read_csv(path, sep=sep)


def as_json_ready(data: Any) -> Any:
    """Recursively convert numpy scalars and paths to JSON-native values."""
    if isinstance(data, dict):
        return {str(key): as_json_ready(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [as_json_ready(item) for item in data]
    if isinstance(data, Path):
        return str(data)
    if isinstance(data, np.floating):
        return float(data)
    if isinstance(data, np.integer):
        return int(data)
    return data
