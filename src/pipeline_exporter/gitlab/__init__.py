"""GitLab client - project lookup, pipeline queries and project listings."""

from pipeline_exporter.gitlab.client import GitlabClient
from pipeline_exporter.gitlab.exceptions import (
    AuthenticationError,
    GitlabConnectionError,
    GitlabError,
    NotFoundError,
)
from pipeline_exporter.gitlab.models import Pipeline, ProjectIdentity

__all__ = [
    "AuthenticationError",
    "GitlabClient",
    "GitlabConnectionError",
    "GitlabError",
    "NotFoundError",
    "Pipeline",
    "ProjectIdentity",
]
