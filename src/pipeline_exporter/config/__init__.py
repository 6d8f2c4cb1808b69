"""Exporter configuration - YAML loading and data models."""

from pipeline_exporter.config.exceptions import ConfigError
from pipeline_exporter.config.loader import load_config
from pipeline_exporter.config.models import (
    DEFAULT_POLLING_INTERVAL,
    ExporterConfig,
    GitlabConfig,
    Owner,
    Project,
    Wildcard,
)

__all__ = [
    "DEFAULT_POLLING_INTERVAL",
    "ConfigError",
    "ExporterConfig",
    "GitlabConfig",
    "Owner",
    "Project",
    "Wildcard",
    "load_config",
]
