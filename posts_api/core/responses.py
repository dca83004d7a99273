"""Response builders and exception handler registration."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from posts_api.core.errors import INVALID_VALUE
from posts_api.core.errors import REQUIRED
from posts_api.core.errors import ROOT_FIELD
from posts_api.core.errors import APIError
from posts_api.core.errors import ErrorKind
from posts_api.core.errors import FieldError
from posts_api.core.errors import classify
from posts_api.core.errors import database_error
from posts_api.core.errors import internal_error
from posts_api.core.errors import log_error
from posts_api.core.errors import not_found
from posts_api.core.errors import validation_error

JSON_MEDIA_TYPE = "application/json"

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def error_response(error: APIError) -> JSONResponse:
    """Pair an error envelope with the error's HTTP status."""
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_payload(),
        media_type=JSON_MEDIA_TYPE,
    )


def success_response(data: Any, status_code: int = status.HTTP_200_OK) -> Response:
    """Serialize ``data`` as JSON; 204 responses carry no body."""
    if status_code == status.HTTP_204_NO_CONTENT:
        return Response(status_code=status_code)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(data),
        media_type=JSON_MEDIA_TYPE,
    )


def validation_response(errors: list[FieldError]) -> JSONResponse:
    return error_response(validation_error(errors))


def not_found_response(resource: str, identifier: str | int | None = None) -> JSONResponse:
    return error_response(not_found(resource, identifier))


def internal_response(message: str = "Internal server error") -> JSONResponse:
    return error_response(internal_error(message))


def _request_context(request: Request) -> dict[str, str]:
    return {"method": request.method, "path": request.url.path}


def _format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    field = ""
    for part in location:
        if part in _LOCATION_PREFIXES:
            continue
        if isinstance(part, int):
            field = f"{field}[{part}]"
        else:
            field = f"{field}.{part}" if field else str(part)
    return field or ROOT_FIELD


def _field_errors(exc: RequestValidationError) -> list[FieldError]:
    errors: list[FieldError] = []
    for issue in exc.errors():
        if issue.get("type") == "json_invalid":
            errors.append(FieldError(ROOT_FIELD, "Request body must be valid JSON", INVALID_VALUE))
            continue
        code = REQUIRED if issue.get("type") == "missing" else INVALID_VALUE
        errors.append(
            FieldError(
                field=_format_location(issue.get("loc", ())),
                message=str(issue.get("msg", "Invalid value")),
                code=code,
            )
        )
    return errors


def _http_error(exc: StarletteHTTPException) -> APIError:
    message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Request failed"
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return APIError(kind=ErrorKind.NOT_FOUND, message=message)
    if exc.status_code == status.HTTP_409_CONFLICT:
        return APIError(kind=ErrorKind.CONFLICT, message=message)
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return internal_error(message)
    return APIError(kind=ErrorKind.VALIDATION, message=message)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Return explicit domain errors in the shared envelope."""
    log_error(exc, _request_context(request))
    return error_response(exc)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI request parsing errors to the shared envelope."""
    error = validation_error(_field_errors(exc))
    log_error(error, _request_context(request))
    return error_response(error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize routing and HTTP exceptions to the shared envelope."""
    error = _http_error(exc)
    log_error(error, _request_context(request))
    return error_response(error)


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Report database failures that escaped the service layer."""
    error = database_error("Database operation failed", exc)
    log_error(error, _request_context(request))
    return error_response(error)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Classify anything else so no raw failure reaches the client."""
    error = classify(exc)
    log_error(error, _request_context(request))
    return error_response(error)


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error handlers to a FastAPI app instance."""
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
