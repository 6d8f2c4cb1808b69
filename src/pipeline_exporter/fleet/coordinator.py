"""FleetCoordinator - Fire-and-forget launch of Ref Pollers."""

from __future__ import annotations

import logging
import os
import threading
from typing import TYPE_CHECKING

from pipeline_exporter.poller import PollerStartupError, RefPoller

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from pipeline_exporter.config import Project
    from pipeline_exporter.gitlab import GitlabClient
    from pipeline_exporter.metrics import MetricStore

logger = logging.getLogger(__name__)


def terminate_process(exc: BaseException) -> None:
    """Exit the whole process; sys.exit() would only end the calling thread."""
    logging.shutdown()
    os._exit(1)


class FleetCoordinator:
    """Starts one daemon thread per (project, ref) and leaves them running.

    There is no pool, supervision or restart. A poller that cannot resolve
    its project at startup hands the error to on_fatal, which by default
    terminates the process.
    """

    def __init__(
        self,
        client: GitlabClient,
        store: MetricStore,
        interval: float,
        on_fatal: Callable[[BaseException], None] = terminate_process,
    ) -> None:
        """Initialize the coordinator.

        Args:
            client: GitLab client shared by all pollers.
            store: Metric store shared by all pollers.
            interval: Polling interval in seconds, identical for every poller.
            on_fatal: Called with the error when a poller fails at startup.
        """
        self.client = client
        self.store = store
        self.interval = interval
        self.on_fatal = on_fatal
        self.pollers: list[RefPoller] = []
        self.threads: list[threading.Thread] = []
        self._stop_event = threading.Event()

    def start(self, projects: Sequence[Project]) -> None:
        """Launch a poller for every ref of every project and return immediately.

        Args:
            projects: Explicit and wildcard-resolved projects. Duplicates are polled twice.
        """
        total_refs = sum(len(project.refs) for project in projects)
        logger.info(
            "%d project(s) configured with a total of %d ref(s)", len(projects), total_refs
        )

        for project in projects:
            for ref in project.refs:
                poller = RefPoller(
                    client=self.client,
                    store=self.store,
                    project_name=project.name,
                    ref=ref,
                    interval=self.interval,
                    stop_event=self._stop_event,
                )
                thread = threading.Thread(
                    target=self._run_poller,
                    args=(poller,),
                    name=f"poller-{project.name}:{ref}",
                    daemon=True,
                )
                thread.start()
                self.pollers.append(poller)
                self.threads.append(thread)

    def stop(self) -> None:
        """Ask every poller to exit after its current cycle."""
        self._stop_event.set()
        logger.info("Stopping %d poller(s)", len(self.threads))

    def _run_poller(self, poller: RefPoller) -> None:
        try:
            poller.run()
        except PollerStartupError as e:
            logger.critical("%s", e)
            self.on_fatal(e)
