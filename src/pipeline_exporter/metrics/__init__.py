"""Metric store - labeled pipeline series shared by all pollers."""

from pipeline_exporter.metrics.exceptions import MetricError
from pipeline_exporter.metrics.store import (
    LAST_RUN_DURATION,
    PIPELINE_STATUS,
    RUN_COUNT,
    TIME_SINCE_LAST_RUN,
    TRACKED_STATUSES,
    MetricStore,
)

__all__ = [
    "LAST_RUN_DURATION",
    "PIPELINE_STATUS",
    "RUN_COUNT",
    "TIME_SINCE_LAST_RUN",
    "TRACKED_STATUSES",
    "MetricError",
    "MetricStore",
]
