"""Custom exceptions for the Project Resolver."""


class ResolverError(Exception):
    """A wildcard could not be expanded into projects."""


class InvalidOwnerKindError(ResolverError):
    """Wildcard owner kind is neither 'user' nor 'group'."""
