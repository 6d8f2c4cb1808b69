"""Configuration loading from YAML."""

from __future__ import annotations

from pathlib import Path

import yaml

from pipeline_exporter.config.exceptions import ConfigError
from pipeline_exporter.config.models import ExporterConfig


def load_config(config_path: Path | str) -> ExporterConfig:
    """Load exporter configuration from a YAML file.

    Args:
        config_path: Path to the config file.

    Returns:
        Parsed configuration object.

    Raises:
        ConfigError: If file doesn't exist or is invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Couldn't open config file: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Unable to parse config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(data).__name__}")

    return ExporterConfig.from_dict(data)
