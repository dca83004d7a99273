"""Closed API error taxonomy, factories and classification helpers.

Every failure that reaches the HTTP boundary is an ``APIError`` whose ``kind``
is one member of ``ErrorKind``. The HTTP status and the machine-readable code
are looked up from the kind, so there is exactly one place that decides how a
failure is reported.
"""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any

from fastapi import status

from posts_api.schemas.error import ErrorObject
from posts_api.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

# Field-level reason codes produced by validators.
REQUIRED = "REQUIRED"
INVALID_TYPE = "INVALID_TYPE"
EMPTY_VALUE = "EMPTY_VALUE"
MAX_LENGTH = "MAX_LENGTH"
INVALID_VALUE = "INVALID_VALUE"
INVALID_URL = "INVALID_URL"
MAX_VALUE = "MAX_VALUE"

ROOT_FIELD = "root"


@dataclass(frozen=True)
class FieldError:
    """Single failed validation rule for one field."""

    field: str
    message: str
    code: str


class ErrorKind(str, Enum):
    """Closed set of failure kinds; the value is the wire-level error code."""

    VALIDATION = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    DUPLICATE_SLUG = "DUPLICATE_SLUG"
    FOREIGN_KEY_CONSTRAINT = "FOREIGN_KEY_CONSTRAINT"
    DATABASE = "DATABASE_ERROR"
    INTERNAL = "INTERNAL_ERROR"


_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.DUPLICATE_SLUG: status.HTTP_409_CONFLICT,
    ErrorKind.FOREIGN_KEY_CONSTRAINT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DATABASE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

if set(_STATUS_BY_KIND) != set(ErrorKind):
    raise RuntimeError("Every ErrorKind must map to an HTTP status")


class APIError(Exception):
    """Application exception for explicit API error responses."""

    def __init__(
        self,
        *,
        kind: ErrorKind,
        message: str,
        details: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = {field: list(messages) for field, messages in details.items()} if details else None

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self.kind]

    @property
    def code(self) -> str:
        return self.kind.value

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-serializable error envelope."""
        payload = ErrorResponse(
            error=ErrorObject(message=self.message, code=self.code, details=self.details or None),
        )
        return payload.model_dump(exclude_none=True)

    def __repr__(self) -> str:
        return f"APIError(kind={self.kind.name}, message={self.message!r})"


def _group_messages(errors: Iterable[FieldError]) -> dict[str, list[str]]:
    details: dict[str, list[str]] = {}
    for error in errors:
        messages = details.setdefault(error.field, [])
        if error.message not in messages:
            messages.append(error.message)
    return details


def validation_error(errors: Iterable[FieldError]) -> APIError:
    """Build a 400 error whose details group field messages by field."""
    return APIError(
        kind=ErrorKind.VALIDATION,
        message="Validation failed",
        details=_group_messages(errors),
    )


def not_found(resource: str, identifier: str | int | None = None) -> APIError:
    if identifier in (None, ""):
        message = f"{resource} not found"
    else:
        message = f"{resource} with ID {identifier} not found"
    return APIError(kind=ErrorKind.NOT_FOUND, message=message)


def conflict(message: str, details: Mapping[str, Sequence[str]] | None = None) -> APIError:
    return APIError(kind=ErrorKind.CONFLICT, message=message, details=details)


def duplicate_slug(slug: str) -> APIError:
    return APIError(
        kind=ErrorKind.DUPLICATE_SLUG,
        message=f"Post with slug '{slug}' already exists",
        details={"slug": [f"Slug '{slug}' is already in use"]},
    )


def foreign_key_constraint(field: str, value: str | int) -> APIError:
    return APIError(
        kind=ErrorKind.FOREIGN_KEY_CONSTRAINT,
        message=f"Referenced {field} with value {value} does not exist",
        details={field: [f"Referenced {field} does not exist"]},
    )


def database_error(message: str, original: BaseException | None = None) -> APIError:
    """Build a 500 database error that keeps the originating exception as its cause."""
    error = APIError(kind=ErrorKind.DATABASE, message=message)
    if original is not None:
        error.__cause__ = original
    return error


def internal_error(message: str = "Internal server error") -> APIError:
    return APIError(kind=ErrorKind.INTERNAL, message=message)


def classify(failure: object) -> APIError:
    """Normalize any failure value into an ``APIError``.

    Typed errors pass through unchanged, other exceptions become an internal
    error carrying their message and anything else becomes a generic internal
    error.
    """
    if isinstance(failure, APIError):
        return failure
    if isinstance(failure, Exception):
        error = internal_error(str(failure) or "Internal server error")
        error.__cause__ = failure
        return error
    return internal_error("An unknown error occurred")


def is_retryable_error(error: APIError) -> bool:
    """Only server-side failures are worth retrying."""
    return error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR


def get_validation_errors(error: APIError) -> list[FieldError]:
    """Flatten the details of a validation error back into field errors."""
    if error.kind is not ErrorKind.VALIDATION or not error.details:
        return []
    return [
        FieldError(field=field, message=message, code=ErrorKind.VALIDATION.value)
        for field, messages in error.details.items()
        for message in messages
    ]


def log_error(error: APIError, context: Mapping[str, Any] | None = None) -> None:
    """Log an API error at a severity derived from its status code."""
    log_data = {
        "message": error.message,
        "code": error.code,
        "status_code": error.status_code,
        "details": error.details,
        "context": dict(context) if context else None,
    }
    if error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("Server error: %s", log_data, exc_info=error.__cause__ or error)
    elif error.status_code >= status.HTTP_400_BAD_REQUEST:
        logger.warning("Client error: %s", log_data)
    else:
        logger.info("API error: %s", log_data)
