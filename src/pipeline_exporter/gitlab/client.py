"""GitlabClient - Thin REST client for the GitLab v4 API."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote

import httpx

from pipeline_exporter.gitlab.exceptions import (
    AuthenticationError,
    GitlabConnectionError,
    GitlabError,
    NotFoundError,
)
from pipeline_exporter.gitlab.models import Pipeline, ProjectIdentity
from pipeline_exporter.logging import sanitize_for_log

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("pipeline_exporter.gitlab")

T = TypeVar("T")

# Filters applied to every wildcard project listing
_LISTING_FILTERS = {"archived": "false", "simple": "true"}


class GitlabClient:
    """Client for the parts of the GitLab API the exporter needs.

    A single instance is shared by every poller thread; httpx.Client is
    safe for concurrent use.
    """

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 30.0,
    ) -> None:
        """Initialize GitLab client.

        Args:
            url: GitLab instance URL (e.g. https://gitlab.com)
            token: Personal/project access token (may be empty for public projects)
            timeout: Per-request timeout in seconds
        """
        self.url = url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the GitLab API."""
        with self._client_lock:
            if self._client is None:
                headers = {"Accept": "application/json"}
                if self.token:
                    headers["PRIVATE-TOKEN"] = self.token
                self._client = httpx.Client(
                    base_url=f"{self.url}/api/v4",
                    headers=headers,
                    timeout=self.timeout,
                    limits=httpx.Limits(max_connections=None, max_keepalive_connections=20),
                )
            return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Issue a GET request and decode the JSON body.

        Raises:
            AuthenticationError: On 401/403.
            NotFoundError: On 404.
            GitlabConnectionError: On transport errors or timeouts.
            GitlabError: On any other non-2xx response.
        """
        logger.debug("GET %s %s", path, params or "")
        try:
            response = self.client.get(path, params=params)
        except httpx.HTTPError as e:
            raise GitlabConnectionError(
                sanitize_for_log(f"Request to {path} failed: {e}")
            ) from e

        if response.status_code in (401, 403):
            raise AuthenticationError(f"GET {path}: {response.status_code} - {response.text}")
        if response.status_code == 404:
            raise NotFoundError(f"GET {path}: not found")
        if response.status_code >= 300:
            raise GitlabError(f"GET {path}: {response.status_code} - {response.text}")

        try:
            return response.json()
        except ValueError as e:
            raise GitlabError(f"GET {path}: invalid JSON response") from e

    @staticmethod
    def _parse(parser: Callable[[dict[str, Any]], T], data: Any, path: str) -> T:
        try:
            return parser(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise GitlabError(f"GET {path}: unexpected payload: {e!r}") from e

    def _get_list(
        self, path: str, parser: Callable[[dict[str, Any]], T], **params: Any
    ) -> list[T]:
        data = self._get(path, params=params or None)
        if not isinstance(data, list):
            raise GitlabError(f"GET {path}: expected a list, got {type(data).__name__}")
        return [self._parse(parser, item, path) for item in data]

    def get_project(self, name: str) -> ProjectIdentity:
        """Look up a project by its path (e.g. "group/project").

        Args:
            name: Full project path with namespace.

        Returns:
            The project's identity.
        """
        path = f"/projects/{quote(name, safe='')}"
        return self._parse(ProjectIdentity.from_api, self._get(path), path)

    def list_pipelines(self, project_id: int, ref: str) -> list[Pipeline]:
        """List pipelines for a ref, newest first (GitLab's default order).

        Args:
            project_id: Numeric project ID.
            ref: Branch or tag name.

        Returns:
            Pipelines in the order GitLab returned them. May be empty.
        """
        return self._get_list(f"/projects/{project_id}/pipelines", Pipeline.from_api, ref=ref)

    def get_pipeline(self, project_id: int, pipeline_id: int) -> Pipeline:
        """Fetch a single pipeline, including its duration."""
        path = f"/projects/{project_id}/pipelines/{pipeline_id}"
        return self._parse(Pipeline.from_api, self._get(path), path)

    def list_user_projects(self, user: str, search: str) -> list[ProjectIdentity]:
        """List non-archived projects owned by a user and matching a search string."""
        return self._get_list(
            f"/users/{quote(user, safe='')}/projects",
            ProjectIdentity.from_api,
            **_LISTING_FILTERS,
            search=search,
        )

    def list_group_projects(self, group: str, search: str) -> list[ProjectIdentity]:
        """List non-archived projects of a group matching a search string."""
        return self._get_list(
            f"/groups/{quote(group, safe='')}/projects",
            ProjectIdentity.from_api,
            **_LISTING_FILTERS,
            search=search,
        )
