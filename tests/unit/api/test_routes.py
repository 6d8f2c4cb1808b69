"""Unit tests for the metrics and health routes."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from pipeline_exporter.api import HealthChecker, create_app
from pipeline_exporter.metrics import LAST_RUN_DURATION, PIPELINE_STATUS, RUN_COUNT, MetricStore


def _transport(status_code: int = 200) -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(status_code, text="sign in"))


def _app(store: MetricStore, checker: HealthChecker | None = None):
    checker = checker or HealthChecker(
        gitlab_url="https://gitlab.example.com", tracked_refs=1000, transport=_transport()
    )
    return create_app(store, checker)


@pytest.mark.unit
class TestMetricsRoute:
    """Tests for GET /metrics."""

    def test_exposes_store(self, store: MetricStore) -> None:
        store.set(LAST_RUN_DURATION, ("group/app", "main"), 42)
        store.increment(RUN_COUNT, ("group/app", "main"))
        store.set(PIPELINE_STATUS, ("group/app", "main", "running"), 1)

        with TestClient(_app(store)) as client:
            response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        body = response.text
        assert (
            'gitlab_ci_pipeline_last_run_duration_seconds{project="group/app",ref="main"} 42.0'
            in body
        )
        assert 'gitlab_ci_pipeline_run_count{project="group/app",ref="main"} 1.0' in body
        assert 'status="running"} 1.0' in body

    def test_reflects_later_writes(self, store: MetricStore) -> None:
        with TestClient(_app(store)) as client:
            assert 'ref="main"' not in client.get("/metrics").text

            store.set(LAST_RUN_DURATION, ("group/app", "main"), 5)

            assert 'ref="main"} 5.0' in client.get("/metrics").text


@pytest.mark.unit
class TestLiveness:
    """Tests for GET /health/live."""

    def test_live_under_threshold(self, store: MetricStore) -> None:
        with TestClient(_app(store)) as client:
            response = client.get("/health/live")

        assert response.status_code == 200
        assert response.json() == {
            "data": {"check": "thread-threshold", "healthy": True, "detail": None},
            "error": None,
        }

    def test_not_live_over_threshold(self, store: MetricStore) -> None:
        checker = HealthChecker(
            gitlab_url="https://gitlab.example.com", tracked_refs=-100, transport=_transport()
        )

        with TestClient(_app(store, checker)) as client:
            response = client.get("/health/live")

        assert response.status_code == 503
        body = response.json()
        assert body["data"]["healthy"] is False
        assert "too many threads" in body["error"]


@pytest.mark.unit
class TestReadiness:
    """Tests for GET /health/ready."""

    def test_ready_when_gitlab_answers(self, store: MetricStore) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200)

        checker = HealthChecker(
            gitlab_url="https://gitlab.example.com/",
            tracked_refs=1000,
            transport=httpx.MockTransport(handler),
        )

        with TestClient(_app(store, checker)) as client:
            response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["data"]["check"] == "gitlab-reachable"
        assert seen == ["https://gitlab.example.com/users/sign_in"]

    def test_not_ready_on_error_status(self, store: MetricStore) -> None:
        checker = HealthChecker(
            gitlab_url="https://gitlab.example.com", tracked_refs=1000, transport=_transport(502)
        )

        with TestClient(_app(store, checker)) as client:
            response = client.get("/health/ready")

        assert response.status_code == 503
        assert "502" in response.json()["error"]

    def test_not_ready_when_unreachable(self, store: MetricStore) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        checker = HealthChecker(
            gitlab_url="https://gitlab.example.com",
            tracked_refs=1000,
            transport=httpx.MockTransport(handler),
        )

        with TestClient(_app(store, checker)) as client:
            response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["data"]["healthy"] is False
