"""Error envelope schemas shared across API handlers."""

from __future__ import annotations

from pydantic import BaseModel


class ErrorObject(BaseModel):
    """Canonical error payload object."""

    message: str
    code: str
    details: dict[str, list[str]] | None = None


class ErrorResponse(BaseModel):
    """Top-level API error response envelope."""

    error: ErrorObject
