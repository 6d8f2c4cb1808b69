"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from pipeline_exporter.gitlab import Pipeline
from pipeline_exporter.metrics import MetricStore

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def store() -> MetricStore:
    """A fresh metric store with its own registry."""
    return MetricStore()


def make_pipeline(
    id: int = 100,
    status: str = "running",
    duration: int = 0,
    created_at: datetime = T0,
    ref: str = "main",
) -> Pipeline:
    """Build a Pipeline with sensible defaults."""
    return Pipeline(id=id, status=status, ref=ref, duration=duration, created_at=created_at)


def pipeline_json(
    id: int = 100,
    status: str = "running",
    duration: int | None = None,
    created_at: datetime = T0,
    ref: str = "main",
) -> dict:
    """A pipeline as returned by the GitLab REST API."""
    return {
        "id": id,
        "iid": id - 90,
        "project_id": 7,
        "status": status,
        "ref": ref,
        "sha": "a91957a858320c0e17f3a0eca7cfacbff50ea29a",
        "duration": duration,
        "created_at": created_at.strftime("%Y-%m-%dT%H:%M:%S.000Z"),
        "web_url": f"https://gitlab.example.com/group/project/-/pipelines/{id}",
    }


class FakeClock:
    """Controllable replacement for the poller's wall clock."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(name="make_pipeline")
def make_pipeline_fixture():
    return make_pipeline


@pytest.fixture(name="pipeline_json")
def pipeline_json_fixture():
    return pipeline_json
