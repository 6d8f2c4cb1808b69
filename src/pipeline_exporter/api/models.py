"""Pydantic models for the HTTP API."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Result of a single liveness or readiness check."""

    check: str
    healthy: bool
    detail: str | None = None
