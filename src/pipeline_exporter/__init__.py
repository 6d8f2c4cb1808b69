"""GitLab CI pipelines exporter - pipeline status as Prometheus metrics."""

__version__ = "0.1.0"
