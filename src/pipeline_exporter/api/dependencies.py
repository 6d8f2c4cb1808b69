"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from pipeline_exporter.api.health import HealthChecker
from pipeline_exporter.metrics import MetricStore

# Global MetricStore instance (shared with the pollers)
_metric_store: MetricStore | None = None


def init_metric_store(store: MetricStore) -> None:
    """Initialize the global MetricStore instance."""
    global _metric_store  # noqa: PLW0603
    _metric_store = store


def close_metric_store() -> None:
    """Release the global MetricStore instance."""
    global _metric_store  # noqa: PLW0603
    _metric_store = None


async def get_metric_store() -> MetricStore:
    """Dependency that provides the MetricStore instance.

    Must stay async: threadpool workers count against the liveness thread threshold.
    """
    if _metric_store is None:
        raise RuntimeError("MetricStore not initialized. Call init_metric_store() first.")
    return _metric_store


# Type alias for dependency injection
MetricStoreDep = Annotated[MetricStore, Depends(get_metric_store)]

# Global HealthChecker instance
_health_checker: HealthChecker | None = None


def init_health_checker(checker: HealthChecker) -> None:
    """Initialize the global HealthChecker instance."""
    global _health_checker  # noqa: PLW0603
    _health_checker = checker


def close_health_checker() -> None:
    """Release the global HealthChecker instance."""
    global _health_checker  # noqa: PLW0603
    _health_checker = None


async def get_health_checker() -> HealthChecker:
    """Dependency that provides the HealthChecker instance."""
    if _health_checker is None:
        raise RuntimeError("HealthChecker not initialized. Call init_health_checker() first.")
    return _health_checker


# Type alias for dependency injection
HealthCheckerDep = Annotated[HealthChecker, Depends(get_health_checker)]
