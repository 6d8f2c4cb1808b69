"""RefPoller - Polls the pipelines of one project ref and updates the metric store."""

from __future__ import annotations

import logging
import math
import threading
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pipeline_exporter.gitlab import GitlabError
from pipeline_exporter.metrics import (
    LAST_RUN_DURATION,
    PIPELINE_STATUS,
    RUN_COUNT,
    TIME_SINCE_LAST_RUN,
    TRACKED_STATUSES,
)
from pipeline_exporter.poller.exceptions import PollerStartupError

if TYPE_CHECKING:
    from collections.abc import Callable

    from pipeline_exporter.gitlab import GitlabClient, Pipeline, ProjectIdentity
    from pipeline_exporter.metrics import MetricStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RefPoller:
    """Tracks the most recent pipeline of a single (project, ref).

    Lifecycle is INIT (project lookup) followed by an endless
    POLL -> COMPARE -> [UPDATE] -> SLEEP loop. The last observed pipeline
    (the snapshot) lives only in this object.

    Errors have two policies:
    - Project lookup at INIT raises PollerStartupError (fatal).
    - Any error inside a cycle, GitLab or otherwise, is logged and the
      cycle is skipped, apart from the staleness gauge.
    """

    def __init__(
        self,
        client: GitlabClient,
        store: MetricStore,
        project_name: str,
        ref: str,
        interval: float,
        stop_event: threading.Event | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the poller.

        Args:
            client: GitLab client used for all queries.
            store: Shared metric store.
            project_name: Project path, used for lookup and as the 'project' label.
            ref: Branch or tag to poll, used as the 'ref' label.
            interval: Seconds to sleep between cycles.
            stop_event: Optional shutdown signal; never set means run forever.
            clock: Source of "now" as an aware datetime.
        """
        self.client = client
        self.store = store
        self.project_name = project_name
        self.ref = ref
        self.interval = interval
        self.identity: ProjectIdentity | None = None
        self.snapshot: Pipeline | None = None
        self._stop_event = stop_event if stop_event is not None else threading.Event()
        self._clock = clock

    @property
    def labels(self) -> tuple[str, str]:
        return (self.project_name, self.ref)

    def resolve_identity(self) -> ProjectIdentity:
        """Look up the project once and cache it.

        Raises:
            PollerStartupError: If GitLab cannot resolve the project.
        """
        if self.identity is None:
            try:
                self.identity = self.client.get_project(self.project_name)
            except GitlabError as e:
                raise PollerStartupError(
                    f"Unable to fetch project '{self.project_name}' from the GitLab API: {e}"
                ) from e
            logger.info("Polling ID: %s | %s:%s", self.identity.id, self.project_name, self.ref)
        return self.identity

    def poll_once(self) -> bool:
        """Run one polling cycle.

        Returns:
            True if a new pipeline state was written to the store.
        """
        identity = self.resolve_identity()

        changed = False
        try:
            pipelines = self.client.list_pipelines(identity.id, self.ref)
        except GitlabError as e:
            logger.warning(
                "Unable to list pipelines for %s:%s, skipping cycle: %s",
                self.project_name,
                self.ref,
                e,
            )
        except Exception as e:
            logger.exception(
                "Error listing pipelines for %s:%s, skipping cycle: %s",
                self.project_name,
                self.ref,
                e,
            )
        else:
            try:
                changed = self._sync(identity, pipelines)
            except Exception as e:
                logger.exception(
                    "Error updating metrics for %s:%s, skipping cycle: %s",
                    self.project_name,
                    self.ref,
                    e,
                )

        try:
            self._update_staleness()
        except Exception as e:
            logger.exception(
                "Error updating staleness for %s:%s: %s", self.project_name, self.ref, e
            )
        return changed

    def run(self) -> None:
        """Resolve the project then poll until the stop event is set.

        Raises:
            PollerStartupError: If the project lookup fails.
        """
        self.resolve_identity()
        while not self._stop_event.is_set():
            self.poll_once()
            self._stop_event.wait(self.interval)
        logger.debug("Poller stopped for %s:%s", self.project_name, self.ref)

    def _sync(self, identity: ProjectIdentity, pipelines: list[Pipeline]) -> bool:
        if not pipelines:
            logger.info("Could not find any pipeline for %s:%s", self.project_name, self.ref)
            return False

        # GitLab lists newest first
        newest = pipelines[0]
        previous = self.snapshot
        if (
            previous is not None
            and newest.id == previous.id
            and newest.status == previous.status
        ):
            return False

        # The list view does not carry the duration
        try:
            detail = self.client.get_pipeline(identity.id, newest.id)
        except GitlabError as e:
            logger.warning(
                "Unable to fetch pipeline %s for %s:%s, skipping cycle: %s",
                newest.id,
                self.project_name,
                self.ref,
                e,
            )
            return False

        if previous is not None:
            self.store.increment(RUN_COUNT, self.labels)

        self.snapshot = detail
        self.store.set(LAST_RUN_DURATION, self.labels, float(detail.duration))
        for status in TRACKED_STATUSES:
            self.store.set(
                PIPELINE_STATUS,
                (*self.labels, status),
                1.0 if status == detail.status else 0.0,
            )

        logger.info(
            "Pipeline %s for %s:%s is now '%s'",
            detail.id,
            self.project_name,
            self.ref,
            detail.status,
        )
        return True

    def _update_staleness(self) -> None:
        if self.snapshot is None:
            return
        elapsed = (self._clock() - self.snapshot.created_at).total_seconds()
        # Nearest whole second
        self.store.set(TIME_SINCE_LAST_RUN, self.labels, float(math.floor(elapsed + 0.5)))
