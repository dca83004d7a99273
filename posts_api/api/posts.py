"""Post API routes."""

from __future__ import annotations

from typing import Any
from typing import TypeVar

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import Header
from fastapi import Request
from fastapi import Response
from sqlalchemy.orm import Session

from posts_api.core.errors import REQUIRED
from posts_api.core.errors import FieldError
from posts_api.core.errors import validation_error
from posts_api.core.responses import success_response
from posts_api.db.base import get_db_session
from posts_api.schemas.post import Post
from posts_api.schemas.post import PostListResponse
from posts_api.services.posts import create_post_service
from posts_api.services.posts import delete_post_service
from posts_api.services.posts import get_post_service
from posts_api.services.posts import list_posts_service
from posts_api.services.posts import update_post_service
from posts_api.validation.base import ValidationResult
from posts_api.validation.posts import create_post_validator
from posts_api.validation.posts import list_posts_query_validator
from posts_api.validation.posts import update_post_validator

router = APIRouter(prefix="/api/v1", tags=["posts"])

T = TypeVar("T")


def _validated(result: ValidationResult[T]) -> T:
    if not result.success:
        raise validation_error(result.errors)
    return result.data


@router.get("/posts", response_model=PostListResponse)
def list_posts_endpoint(
    request: Request,
    session: Session = Depends(get_db_session),
) -> PostListResponse:
    """List posts with optional filters, sorting and pagination."""
    query = _validated(list_posts_query_validator.validate(dict(request.query_params)))
    return list_posts_service(session, query)


@router.get("/posts/{post_id}", response_model=Post)
def get_post_endpoint(
    post_id: int,
    session: Session = Depends(get_db_session),
) -> Post:
    """Get a single post by id."""
    return get_post_service(session, post_id)


@router.post("/posts", response_model=Post, status_code=201)
def create_post_endpoint(
    payload: Any = Body(default=None),
    author_id: str | None = Header(default=None, alias="X-Author-Id"),
    session: Session = Depends(get_db_session),
) -> Post:
    """Create a post authored by the user named in ``X-Author-Id``."""
    result = create_post_validator.validate(payload)
    errors = [] if result.success else list(result.errors)
    if author_id is None or not author_id.strip():
        errors.append(FieldError("authorId", "Author ID is required", REQUIRED))
    if errors:
        raise validation_error(errors)
    return create_post_service(session, result.data, author_id=author_id.strip())


@router.patch("/posts/{post_id}", response_model=Post)
def update_post_endpoint(
    post_id: int,
    payload: Any = Body(default=None),
    session: Session = Depends(get_db_session),
) -> Post:
    """Update a post."""
    update = _validated(update_post_validator.validate(payload))
    return update_post_service(session, post_id, update)


@router.delete("/posts/{post_id}", status_code=204)
def delete_post_endpoint(
    post_id: int,
    session: Session = Depends(get_db_session),
) -> Response:
    """Delete a post."""
    delete_post_service(session, post_id)
    return success_response(None, status_code=204)
