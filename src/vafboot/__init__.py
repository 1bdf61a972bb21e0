"""vafboot: bootstrap distributions of cluster-mean variant allele frequencies."""

from __future__ import annotations

__version__ = "0.1.0"

# Core resampling
from .engine import generate_boot, run_bootstrap
from .models import BootstrapModel, draw_bootstrap_means
from .result import BootResult, ZERO_MEANS_KEY
from .stats import ClusterStats, estimate_cluster_stats
from .validation import VariantTable, validate_variants

# Configuration and reproducibility
from .config import RunConfig, load_config, dump_config
from .rng import RandomState

__all__ = [
    "__version__",
    # Core resampling
    "generate_boot",
    "run_bootstrap",
    "BootstrapModel",
    "draw_bootstrap_means",
    "BootResult",
    "ZERO_MEANS_KEY",
    "ClusterStats",
    "estimate_cluster_stats",
    "VariantTable",
    "validate_variants",
    # Configuration
    "RunConfig",
    "load_config",
    "dump_config",
    "RandomState",
]
