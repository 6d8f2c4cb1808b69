"""Project Resolver - Expands wildcards into concrete projects."""

from pipeline_exporter.resolver.exceptions import InvalidOwnerKindError, ResolverError
from pipeline_exporter.resolver.resolver import OWNER_KINDS, ProjectResolver

__all__ = [
    "OWNER_KINDS",
    "InvalidOwnerKindError",
    "ProjectResolver",
    "ResolverError",
]
