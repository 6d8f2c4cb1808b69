"""ProjectResolver - Turns wildcard search patterns into tracked projects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pipeline_exporter.config import Project
from pipeline_exporter.gitlab import GitlabError
from pipeline_exporter.resolver.exceptions import InvalidOwnerKindError, ResolverError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pipeline_exporter.config import Wildcard
    from pipeline_exporter.gitlab import GitlabClient, ProjectIdentity

logger = logging.getLogger(__name__)

OWNER_KINDS = ("user", "group")


class ProjectResolver:
    """Expands wildcards by querying GitLab project listings.

    Every matching project inherits the wildcard's refs verbatim. Projects
    reachable through several wildcards, or also listed explicitly, are
    returned once per match.
    """

    def __init__(self, client: GitlabClient) -> None:
        """Initialize the resolver.

        Args:
            client: GitLab client providing user/group project listings.
        """
        self.client = client

    def resolve(self, wildcards: Sequence[Wildcard]) -> list[Project]:
        """Expand each wildcard, in order, into projects.

        Args:
            wildcards: Wildcards from the configuration.

        Returns:
            Resolved projects in wildcard order, then listing order.

        Raises:
            ResolverError: If any listing fails or an owner kind is invalid.
        """
        projects: list[Project] = []
        for wildcard in wildcards:
            projects.extend(self._list_projects(wildcard))
        return projects

    def merge(self, projects: Sequence[Project], wildcards: Sequence[Wildcard]) -> list[Project]:
        """Explicit projects followed by every wildcard-resolved project."""
        return [*projects, *self.resolve(wildcards)]

    def _list_projects(self, wildcard: Wildcard) -> list[Project]:
        owner = wildcard.owner
        logger.info(
            "Listing all projects using search pattern '%s' with owner '%s' (%s)",
            wildcard.search,
            owner.name,
            owner.kind,
        )

        if owner.kind not in OWNER_KINDS:
            raise InvalidOwnerKindError(
                f"Invalid owner kind '{owner.kind}' must be either 'user' or 'group'"
            )

        remote: list[ProjectIdentity]
        try:
            if owner.kind == "user":
                remote = self.client.list_user_projects(owner.name, wildcard.search)
            else:
                remote = self.client.list_group_projects(owner.name, wildcard.search)
        except GitlabError as e:
            raise ResolverError(
                f"Unable to list projects with search pattern '{wildcard.search}' "
                f"from the GitLab API: {e}"
            ) from e

        projects = []
        for identity in remote:
            logger.info("Found project: %s", identity.path_with_namespace)
            projects.append(Project(name=identity.path_with_namespace, refs=list(wildcard.refs)))
        return projects
