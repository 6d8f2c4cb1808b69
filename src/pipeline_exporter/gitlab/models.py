"""Data models for the GitLab client."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


def parse_timestamp(value: str) -> datetime:
    """Parse a GitLab ISO 8601 timestamp into an aware datetime.

    Raises:
        TypeError: If value is not a string.
        ValueError: If value is malformed or carries no UTC offset.
    """
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO 8601 string, got {type(value).__name__}")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp '{value}' has no UTC offset")
    return parsed


@dataclass(frozen=True)
class ProjectIdentity:
    """A project as resolved by the GitLab API."""

    id: int
    path_with_namespace: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ProjectIdentity:
        return cls(id=int(data["id"]), path_with_namespace=data["path_with_namespace"])


@dataclass(frozen=True)
class Pipeline:
    """One pipeline run as observed at a point in time.

    Attributes:
        id: Pipeline ID, unique within the GitLab instance.
        status: Raw GitLab status string (success, failed, running, pending, ...).
        ref: Branch or tag the pipeline ran for.
        duration: Run time in seconds. 0 while unfinished or in list views.
        created_at: When the pipeline was created.
    """

    id: int
    status: str
    ref: str
    duration: int
    created_at: datetime

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Pipeline:
        return cls(
            id=int(data["id"]),
            status=data["status"],
            ref=data.get("ref") or "",
            duration=int(data.get("duration") or 0),
            created_at=parse_timestamp(data["created_at"]),
        )
