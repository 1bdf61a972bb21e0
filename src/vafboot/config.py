"""Configuration management for vafboot runs."""

from __future__ import annotations

import hashlib
import json
import yaml
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationError


@dataclass
class ColumnsConfig:
    """Column layout of the variants table."""
    cluster: str = "cluster"
    vaf: Optional[List[str]] = None
    depth: Optional[List[str]] = None
    vaf_in_percent: bool = True


@dataclass
class BootstrapConfig:
    """Configuration for bootstrap resampling."""
    model: str = "non-parametric"
    num_boots: int = 1000
    weighted: bool = False
    zero_sample: Optional[List[float]] = None
    n_jobs: int = 1


@dataclass
class RunConfig:
    """Main run configuration."""
    run_id: str
    seed: int
    columns: ColumnsConfig = field(default_factory=ColumnsConfig)
    bootstrap: BootstrapConfig = field(default_factory=BootstrapConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    def config_hash(self) -> str:
        """Compute deterministic hash of configuration."""
        config_str = json.dumps(self.to_dict(), sort_keys=True)
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]


def config_from_dict(data: Dict[str, Any]) -> RunConfig:
    """Build a ``RunConfig`` from a parsed mapping."""
    try:
        return RunConfig(
            run_id=data['run_id'],
            seed=data['seed'],
            columns=ColumnsConfig(**(data.get('columns') or {})),
            bootstrap=BootstrapConfig(**(data.get('bootstrap') or {})),
        )
    except (KeyError, TypeError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_config(path: str | Path) -> RunConfig:
    """Load configuration from YAML file.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid YAML,
            or does not describe a ``RunConfig``
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must contain a dictionary")
    return config_from_dict(data)


def dump_config(config: RunConfig, path: str | Path) -> None:
    """Save configuration to YAML file."""
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False)
