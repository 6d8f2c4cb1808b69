"""Custom exceptions for the GitLab client."""


class GitlabError(Exception):
    """Base exception for GitLab API errors."""


class AuthenticationError(GitlabError):
    """Token missing, invalid or lacking permissions."""


class NotFoundError(GitlabError):
    """Requested project, group, user or pipeline does not exist."""


class GitlabConnectionError(GitlabError):
    """GitLab could not be reached or did not answer in time."""
