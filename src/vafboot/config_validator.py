"""
Configuration validation for vafboot.

Collects every problem in a configuration mapping at once, as errors
(run cannot proceed) or warnings (run will proceed but is likely unwise).
"""

from typing import Dict, Any, List, Tuple
import logging
from pathlib import Path

from .exceptions import ConfigurationError
from .models import MODEL_NAMES


class ConfigValidator:
    """Validate configuration parameters for a resampling run."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.errors = []
        self.warnings = []

    def validate_config(self, config: Dict[str, Any]) -> Tuple[bool, List[str], List[str]]:
        """Validate complete configuration.

        Args:
            config: Configuration dictionary to validate

        Returns:
            Tuple of (is_valid, errors, warnings)
        """
        self.errors = []
        self.warnings = []

        for key in ['run_id', 'seed']:
            if key not in config:
                self.errors.append(f"Missing required configuration key: {key}")

        columns = config.get('columns') or {}
        bootstrap = config.get('bootstrap') or {}
        if not isinstance(columns, dict):
            self.errors.append("columns must be a mapping")
            columns = {}
        if not isinstance(bootstrap, dict):
            self.errors.append("bootstrap must be a mapping")
            bootstrap = {}

        self._validate_columns_config(columns, bool(bootstrap.get('weighted', False)))
        self._validate_bootstrap_config(bootstrap)
        self._validate_general_config(config)

        for warning in self.warnings:
            self.logger.warning(warning)

        is_valid = len(self.errors) == 0
        return is_valid, self.errors, self.warnings

    def _validate_columns_config(self, columns: Dict[str, Any], weighted: bool) -> None:
        """Validate the column layout."""
        cluster = columns.get('cluster', 'cluster')
        if not isinstance(cluster, str) or not cluster:
            self.errors.append("columns.cluster must be a non-empty string")

        for key in ['vaf', 'depth']:
            value = columns.get(key)
            if value is not None and (
                not isinstance(value, list) or not all(isinstance(v, str) for v in value)
            ):
                self.errors.append(f"columns.{key} must be a list of column names")

        vaf = columns.get('vaf')
        depth = columns.get('depth')
        if weighted:
            if vaf is None or depth is None:
                self.errors.append("weighted resampling requires columns.vaf and columns.depth")
            elif isinstance(vaf, list) and isinstance(depth, list):
                if len(vaf) != len(depth):
                    self.errors.append("columns.vaf and columns.depth must have the same length")
                if set(vaf) & set(depth):
                    self.errors.append("columns.vaf and columns.depth must not overlap")
        elif depth:
            self.warnings.append("columns.depth is ignored unless bootstrap.weighted is true")

        if vaf is None:
            self.warnings.append("columns.vaf not set; every non-cluster column is treated as a VAF column")

        in_percent = columns.get('vaf_in_percent', True)
        if not isinstance(in_percent, bool):
            self.errors.append("columns.vaf_in_percent must be true or false")

    def _validate_bootstrap_config(self, bootstrap: Dict[str, Any]) -> None:
        """Validate bootstrap resampling settings."""
        model = bootstrap.get('model', 'non-parametric')
        if model not in MODEL_NAMES:
            self.errors.append(f"bootstrap.model must be one of {', '.join(MODEL_NAMES)}")

        num_boots = bootstrap.get('num_boots', 1000)
        if isinstance(num_boots, bool) or not isinstance(num_boots, int):
            self.errors.append("bootstrap.num_boots must be an integer")
        elif num_boots < 1:
            self.errors.append("bootstrap.num_boots must be positive")
        elif num_boots < 100:
            self.warnings.append(f"bootstrap.num_boots is low ({num_boots}), consider >= 1000 for stable distributions")

        weighted = bootstrap.get('weighted', False)
        if not isinstance(weighted, bool):
            self.errors.append("bootstrap.weighted must be true or false")

        zero_sample = bootstrap.get('zero_sample')
        if zero_sample is not None:
            if not isinstance(zero_sample, list):
                self.errors.append("bootstrap.zero_sample must be a list of VAFs")
            else:
                for i, v in enumerate(zero_sample):
                    if isinstance(v, bool) or not isinstance(v, (int, float)):
                        self.errors.append(f"bootstrap.zero_sample[{i}] must be numeric")
                    elif not 0 <= v <= 1:
                        self.errors.append(f"bootstrap.zero_sample[{i}] must be between 0 and 1")

        n_jobs = bootstrap.get('n_jobs', 1)
        if isinstance(n_jobs, bool) or not isinstance(n_jobs, int):
            self.errors.append("bootstrap.n_jobs must be an integer")
        elif n_jobs == 0 or n_jobs < -1:
            self.errors.append("bootstrap.n_jobs must be positive or -1 for all cores")

    def _validate_general_config(self, config: Dict[str, Any]) -> None:
        """Validate general configuration parameters."""
        if 'run_id' in config:
            run_id = config['run_id']
            if not isinstance(run_id, str):
                self.errors.append("run_id must be a string")
            elif not run_id.strip():
                self.errors.append("run_id cannot be empty")
            elif not run_id.replace('_', '').replace('-', '').isalnum():
                self.warnings.append("run_id should contain only alphanumeric characters, dashes, and underscores")

        if 'seed' in config:
            seed = config['seed']
            if isinstance(seed, bool) or not isinstance(seed, int):
                self.errors.append("seed must be an integer")
            elif seed < 0:
                self.errors.append("seed must be non-negative")


def validate_config_file(config_path: Path) -> Tuple[bool, List[str], List[str]]:
    """Validate a configuration file.

    Args:
        config_path: Path to configuration YAML file

    Returns:
        Tuple of (is_valid, errors, warnings)

    Raises:
        ConfigurationError: If file cannot be read or parsed
    """
    import yaml

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
    except (IOError, OSError) as e:
        raise ConfigurationError(f"Cannot read configuration file: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError("Configuration file must contain a dictionary")

    validator = ConfigValidator()
    return validator.validate_config(config)
