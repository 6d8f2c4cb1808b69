"""Ref Poller - One polling loop per (project, ref)."""

from pipeline_exporter.poller.exceptions import PollerError, PollerStartupError
from pipeline_exporter.poller.poller import RefPoller

__all__ = [
    "PollerError",
    "PollerStartupError",
    "RefPoller",
]
