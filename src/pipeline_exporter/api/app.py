"""FastAPI application setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from pipeline_exporter import __version__
from pipeline_exporter.api.dependencies import (
    close_health_checker,
    close_metric_store,
    init_health_checker,
    init_metric_store,
)
from pipeline_exporter.api.routes import health, metrics

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from pipeline_exporter.api.health import HealthChecker
    from pipeline_exporter.metrics import MetricStore


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    init_metric_store(app.state.metric_store)
    init_health_checker(app.state.health_checker)

    yield
    # Shutdown
    close_health_checker()
    close_metric_store()


def create_app(store: MetricStore, health_checker: HealthChecker) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        store: Metric store written by the pollers.
        health_checker: Checks backing the health probes.
    """
    app = FastAPI(
        title="GitLab CI pipelines exporter",
        description="Prometheus metrics for GitLab CI pipelines",
        version=__version__,
        lifespan=lifespan,
    )

    # Store collaborators for lifespan manager
    app.state.metric_store = store
    app.state.health_checker = health_checker

    app.include_router(metrics.router)
    app.include_router(health.router)

    return app
