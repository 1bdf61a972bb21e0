"""
Input validation for bootstrap resampling.

Resolves and checks the cluster, VAF and depth columns of a variants
table, converts VAFs from percent to proportion when asked, and returns an
immutable ``VariantTable`` that the resampling engine consumes as-is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .exceptions import ConfigurationError, InputSchemaError, RangeError
from .models import MODEL_NAMES, parse_model
from .result import ZERO_MEANS_KEY

logger = logging.getLogger(__name__)

_MODEL_HINT = (
    "User must specify statistical model for parametric bootstrap resampling. "
    "Model can be " + ", ".join(repr(n) for n in MODEL_NAMES) + "."
)


@dataclass(frozen=True)
class VariantTable:
    """Validated variants with explicitly resolved columns."""

    frame: pd.DataFrame
    cluster_col: str
    vaf_cols: Tuple[str, ...]
    depth_cols: Tuple[str, ...]
    weighted: bool

    @property
    def clusters(self) -> List[str]:
        """Cluster labels in order of first appearance."""
        return [str(c) for c in pd.unique(self.frame[self.cluster_col])]

    @property
    def is_empty(self) -> bool:
        return len(self.vaf_cols) == 0 or len(self.clusters) == 0

    def cluster_groups(self) -> List[Tuple[str, pd.DataFrame]]:
        """(label, rows) pairs in first-appearance order."""
        labels = self.frame[self.cluster_col].astype(str)
        grouped = self.frame.groupby(labels, sort=False)
        return [(label, grouped.get_group(label)) for label in self.clusters]

    def depth_col_for(self, vaf_col: str) -> Optional[str]:
        if not self.weighted:
            return None
        return self.depth_cols[self.vaf_cols.index(vaf_col)]


def _missing(columns: Sequence[str], frame: pd.DataFrame) -> List[str]:
    return [col for col in columns if col not in frame.columns]


def validate_variants(
    variants: pd.DataFrame,
    cluster_col: Optional[str] = "cluster",
    vaf_cols: Optional[Sequence[str]] = None,
    depth_cols: Optional[Sequence[str]] = None,
    vaf_in_percent: bool = True,
    bootstrap_model: Optional[str] = "non-parametric",
    weighted: bool = False,
) -> VariantTable:
    """Validate a variants table and resolve its columns.

    Args:
        variants: One row per variant, with a cluster column and VAF (and,
            for weighted resampling, depth) columns per sample
        cluster_col: Name of the cluster column
        vaf_cols: VAF column names; when unweighted and omitted, every
            column except the cluster column is taken as a VAF column
        depth_cols: Depth column names, paired with ``vaf_cols`` by position
        vaf_in_percent: Divide VAFs by 100 before use
        bootstrap_model: Model the table will be resampled with
        weighted: Weight variants by read depth

    Returns:
        VariantTable holding a converted copy of the data

    Raises:
        ConfigurationError: If the model, weighted flag or column lists are invalid
        InputSchemaError: If referenced columns are missing from the table, or
            distinct cluster labels share the same text (e.g. 1 and "1")
        RangeError: If VAFs fall outside [0, 1] or depths are not positive
    """
    if bootstrap_model is None:
        raise ConfigurationError(_MODEL_HINT)
    try:
        parse_model(bootstrap_model)
    except ConfigurationError as exc:
        raise ConfigurationError(_MODEL_HINT, {"model": bootstrap_model}) from exc

    if not isinstance(weighted, (bool, np.bool_)):
        raise ConfigurationError("'weighted' parameter must be True or False. Default is False.")
    weighted = bool(weighted)

    if cluster_col is None:
        raise ConfigurationError("Input error: cluster column name cannot be null.")
    if cluster_col not in variants.columns:
        raise InputSchemaError(
            f"Input error: cluster column {cluster_col!r} does not appear in variants table.",
            {"cluster_col": cluster_col},
        )

    if vaf_cols is not None:
        missing = _missing(vaf_cols, variants)
        if missing:
            raise InputSchemaError(
                f"Input error: VAF columns not in variants table: {missing}",
                {"missing": missing},
            )
    if weighted and depth_cols is not None:
        missing = _missing(depth_cols, variants)
        if missing:
            raise InputSchemaError(
                f"Input error: depth columns not in variants table: {missing}",
                {"missing": missing},
            )

    if weighted:
        if vaf_cols is None or depth_cols is None:
            raise ConfigurationError(
                "Input error: for weighted resampling, please specify all VAF and depth column names."
            )
        if len(vaf_cols) != len(depth_cols):
            raise ConfigurationError(
                "Input error: different number of VAF and depth columns.",
                {"n_vaf": len(vaf_cols), "n_depth": len(depth_cols)},
            )
        overlap = sorted(set(vaf_cols) & set(depth_cols))
        if overlap:
            raise ConfigurationError(
                f"Input error: VAF and depth column names overlap: {overlap}",
                {"overlap": overlap},
            )
        depth_cols = list(depth_cols)
    else:
        if vaf_cols is None:
            vaf_cols = [col for col in variants.columns if col != cluster_col]
            logger.info(
                "VAF columns assumed to be every column except the cluster column. "
                "Depth columns, if given, are ignored."
            )
        depth_cols = []
    vaf_cols = list(vaf_cols)

    if ZERO_MEANS_KEY in vaf_cols:
        raise ConfigurationError(f"{ZERO_MEANS_KEY!r} is reserved and cannot name a VAF column")

    frame = variants.loc[:, [cluster_col] + vaf_cols + list(depth_cols)].copy()
    raw_labels = pd.unique(frame[cluster_col])
    labels = pd.Series([str(c) for c in raw_labels], dtype=object)
    if labels.duplicated().any():
        collided = sorted(set(labels[labels.duplicated()]))
        raise InputSchemaError(
            f"Input error: cluster labels {collided} are ambiguous once converted to text.",
            {"labels": collided},
        )

    table = VariantTable(frame, cluster_col, tuple(vaf_cols), tuple(depth_cols), weighted)
    if table.is_empty:
        logger.info("No clusters or no sample columns; nothing to resample")
        return table

    try:
        frame[vaf_cols] = frame[vaf_cols].astype(np.float64)
    except (TypeError, ValueError) as exc:
        raise RangeError(f"Input error: VAF columns must be numeric: {exc}") from exc
    if vaf_in_percent:
        frame[vaf_cols] = frame[vaf_cols] / 100.0
        logger.info("All VAFs were divided by 100 to convert from percentage to proportion.")

    values = frame[vaf_cols].to_numpy()
    if np.isnan(values).any() or (values < 0).any() or (values > 1).any():
        raise RangeError("Input error: some VAFs not between 0 and 1.")

    if weighted:
        depths = frame[depth_cols].to_numpy(dtype=np.float64)
        if np.isnan(depths).any() or (depths <= 0).any():
            raise RangeError("Input error: read depths must be positive.")

    return table
