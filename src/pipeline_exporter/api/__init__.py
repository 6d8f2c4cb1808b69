"""HTTP API - Prometheus scrape endpoint and health probes."""

from pipeline_exporter.api.app import create_app
from pipeline_exporter.api.health import HealthChecker
from pipeline_exporter.api.models import APIResponse, HealthResponse

__all__ = [
    "APIResponse",
    "HealthChecker",
    "HealthResponse",
    "create_app",
]
