"""Liveness and readiness checks."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)

# Headroom above one thread per poller for main, server and housekeeping threads
THREAD_HEADROOM = 20
READY_TIMEOUT = 5.0


@dataclass
class CheckResult:
    """Outcome of a health check."""

    check: str
    healthy: bool
    detail: str | None = None


class HealthChecker:
    """Checks backing /health/live and /health/ready.

    Liveness fails once the process runs more threads than expected, which
    points at leaked threads. Readiness fails when the GitLab sign-in page
    cannot be fetched.
    """

    def __init__(
        self,
        gitlab_url: str,
        tracked_refs: int,
        timeout: float = READY_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the checker.

        Args:
            gitlab_url: GitLab instance URL.
            tracked_refs: Number of poller threads launched.
            timeout: Readiness request timeout in seconds.
            transport: Optional httpx transport (for testing).
        """
        self.gitlab_url = gitlab_url.rstrip("/")
        self.thread_threshold = tracked_refs + THREAD_HEADROOM
        self.timeout = timeout
        self._transport = transport

    def check_live(self) -> CheckResult:
        count = threading.active_count()
        if count > self.thread_threshold:
            return CheckResult(
                check="thread-threshold",
                healthy=False,
                detail=f"too many threads ({count} > {self.thread_threshold})",
            )
        return CheckResult(check="thread-threshold", healthy=True)

    async def check_ready(self) -> CheckResult:
        url = f"{self.gitlab_url}/users/sign_in"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport, follow_redirects=True
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            logger.warning("GitLab readiness check failed: %s", e)
            return CheckResult(check="gitlab-reachable", healthy=False, detail=str(e))

        if response.status_code != 200:
            return CheckResult(
                check="gitlab-reachable",
                healthy=False,
                detail=f"returned status {response.status_code}",
            )
        return CheckResult(check="gitlab-reachable", healthy=True)
