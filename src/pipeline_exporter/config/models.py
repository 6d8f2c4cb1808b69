"""Data models for exporter configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from pipeline_exporter.config.exceptions import ConfigError

DEFAULT_POLLING_INTERVAL = 30


def _refs_from(data: dict[str, Any], where: str) -> list[str]:
    refs = data.get("refs") or []
    if not isinstance(refs, list):
        raise ConfigError(f"'refs' of {where} must be a list")
    return [str(ref) for ref in refs]


@dataclass(frozen=True)
class Project:
    """A tracked project and the refs polled for it."""

    name: str
    refs: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Project:
        if not isinstance(data, dict) or not data.get("name"):
            raise ConfigError(f"Project entry is missing 'name': {data!r}")
        name = str(data["name"])
        return cls(name=name, refs=_refs_from(data, f"project '{name}'"))


@dataclass(frozen=True)
class Owner:
    """Owner of the projects matched by a wildcard.

    Attributes:
        name: User or group path.
        kind: Either "user" or "group". Checked by the resolver, not here.
    """

    name: str
    kind: str


@dataclass(frozen=True)
class Wildcard:
    """A search pattern expanded into projects at startup."""

    search: str
    owner: Owner
    refs: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Wildcard:
        if not isinstance(data, dict) or "search" not in data:
            raise ConfigError(f"Wildcard entry is missing 'search': {data!r}")
        owner_data = data.get("owner")
        if not isinstance(owner_data, dict) or not owner_data.get("name"):
            raise ConfigError(f"Wildcard '{data['search']}' is missing 'owner.name'")

        return cls(
            search=str(data["search"]),
            owner=Owner(name=str(owner_data["name"]), kind=str(owner_data.get("kind", ""))),
            refs=_refs_from(data, f"wildcard '{data['search']}'"),
        )


@dataclass
class GitlabConfig:
    """GitLab connection settings."""

    url: str
    token: str = ""


@dataclass
class ExporterConfig:
    """Exporter configuration as read from the YAML file."""

    gitlab: GitlabConfig
    polling_interval_seconds: int = DEFAULT_POLLING_INTERVAL
    projects: list[Project] = field(default_factory=list)
    wildcards: list[Wildcard] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExporterConfig:
        """Create config from dictionary.

        Args:
            data: Configuration dictionary from YAML.

        Returns:
            Parsed configuration object.

        Raises:
            ConfigError: If required fields are missing or malformed.
        """
        gitlab_data = data.get("gitlab") or {}
        if not isinstance(gitlab_data, dict) or not gitlab_data.get("url"):
            raise ConfigError("Missing required field: gitlab.url")

        token = gitlab_data.get("token") or os.environ.get("GITLAB_TOKEN", "")
        gitlab = GitlabConfig(url=str(gitlab_data["url"]).rstrip("/"), token=str(token))

        interval = data.get("polling_interval_seconds", DEFAULT_POLLING_INTERVAL)
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            raise ConfigError(
                f"polling_interval_seconds must be a positive integer, got {interval!r}"
            )

        projects_data = data.get("projects") or []
        wildcards_data = data.get("wildcards") or []
        if not isinstance(projects_data, list):
            raise ConfigError("'projects' must be a list")
        if not isinstance(wildcards_data, list):
            raise ConfigError("'wildcards' must be a list")

        return cls(
            gitlab=gitlab,
            polling_interval_seconds=interval,
            projects=[Project.from_dict(p) for p in projects_data],
            wildcards=[Wildcard.from_dict(w) for w in wildcards_data],
        )

    def validate_targets(self) -> None:
        """Ensure there is at least one project or wildcard to poll.

        Raises:
            ConfigError: If neither projects nor wildcards are configured.
        """
        if not self.projects and not self.wildcards:
            raise ConfigError(
                "You need to configure at least one project/wildcard to poll, none given"
            )

    def total_refs(self) -> int:
        """Number of refs across the explicitly configured projects."""
        return sum(len(project.refs) for project in self.projects)
