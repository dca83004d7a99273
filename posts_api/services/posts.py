"""Service helpers for post API operations."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from posts_api.core.errors import APIError
from posts_api.core.errors import conflict
from posts_api.core.errors import database_error
from posts_api.core.errors import duplicate_slug
from posts_api.core.errors import foreign_key_constraint
from posts_api.core.errors import not_found
from posts_api.db.models.post import Post
from posts_api.db.models.tag import Tag
from posts_api.db.repository.posts import UNSET
from posts_api.db.repository.posts import count_posts
from posts_api.db.repository.posts import create_post
from posts_api.db.repository.posts import delete_post
from posts_api.db.repository.posts import get_post
from posts_api.db.repository.posts import list_posts
from posts_api.db.repository.posts import list_slugs_with_prefix
from posts_api.db.repository.posts import update_post
from posts_api.db.repository.references import get_category
from posts_api.db.repository.references import get_tags
from posts_api.db.repository.references import get_user
from posts_api.schemas.post import PaginationMeta
from posts_api.schemas.post import PostCreate
from posts_api.schemas.post import PostListQuery
from posts_api.schemas.post import PostListResponse
from posts_api.schemas.post import PostUpdate
from posts_api.utils.pagination import DEFAULT_PAGE
from posts_api.utils.pagination import DEFAULT_PAGE_SIZE
from posts_api.utils.pagination import DEFAULT_SORT_FIELD
from posts_api.utils.pagination import DEFAULT_SORT_ORDER
from posts_api.utils.pagination import paginate
from posts_api.utils.slugs import slugify
from posts_api.utils.slugs import unique_slug

logger = logging.getLogger(__name__)


def _ensure_category_exists(session: Session, category_id: int) -> None:
    if get_category(session, category_id) is None:
        raise foreign_key_constraint("categoryId", category_id)


def _resolve_tags(session: Session, tag_ids: list[int]) -> list[Tag]:
    wanted = list(dict.fromkeys(tag_ids))
    tags = get_tags(session, wanted)
    found = {tag.id for tag in tags}
    missing = [tag_id for tag_id in wanted if tag_id not in found]
    if missing:
        raise foreign_key_constraint("tagIds", ", ".join(str(tag_id) for tag_id in missing))
    return tags


def _integrity_error(exc: IntegrityError, *, slug: str | None = None) -> APIError:
    if slug is not None and "slug" in str(exc.orig).lower():
        return duplicate_slug(slug)
    return conflict("Post conflicts with existing data")


def list_posts_service(session: Session, query: PostListQuery) -> PostListResponse:
    """List posts with filters, sorting and pagination metadata."""
    filters = {
        "category_id": query.category_id,
        "tag_ids": query.tag_ids,
        "author_id": query.author_id,
        "search": query.search,
    }
    total = count_posts(session, **filters)
    window = paginate(query.page or DEFAULT_PAGE, query.limit or DEFAULT_PAGE_SIZE, total)
    posts: list[Post] = []
    if window.offset < total:
        posts = list_posts(
            session,
            **filters,
            sort_by=query.sort_by or DEFAULT_SORT_FIELD,
            sort_order=query.sort_order or DEFAULT_SORT_ORDER,
            limit=window.limit,
            offset=window.offset,
        )
    return PostListResponse(
        data=posts,
        pagination=PaginationMeta(
            page=window.page,
            limit=window.limit,
            total=total,
            total_pages=window.total_pages,
        ),
    )


def get_post_service(session: Session, post_id: int) -> Post:
    """Fetch a post or raise not found."""
    post = get_post(session, post_id)
    if post is None:
        raise not_found("Post", post_id)
    return post


def create_post_service(session: Session, payload: PostCreate, *, author_id: str) -> Post:
    """Create a post with a unique slug derived from its title."""
    if get_user(session, author_id) is None:
        raise foreign_key_constraint("authorId", author_id)
    _ensure_category_exists(session, payload.category_id)
    tags = _resolve_tags(session, payload.tag_ids or [])

    slug = unique_slug(payload.title, list_slugs_with_prefix(session, slugify(payload.title)))
    try:
        post = create_post(
            session,
            title=payload.title,
            slug=slug,
            content=payload.content,
            author_id=author_id,
            category_id=payload.category_id,
            description=payload.description,
            cover_image_url=payload.cover_image_url,
            read_time=payload.read_time,
            tags=tags,
        )
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise _integrity_error(exc, slug=slug) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise database_error("Failed to create post", exc) from exc

    logger.info("Created post id=%s slug=%s", post.id, post.slug)
    return get_post_service(session, post.id)


def update_post_service(session: Session, post_id: int, payload: PostUpdate) -> Post:
    """Update the provided fields of an existing post; the slug is kept stable."""
    post = get_post_service(session, post_id)
    changes = payload.model_dump(exclude_unset=True, exclude={"tag_ids"})
    if "category_id" in changes:
        _ensure_category_exists(session, changes["category_id"])
    tags: list[Tag] | object = UNSET
    if "tag_ids" in payload.model_fields_set:
        tags = _resolve_tags(session, payload.tag_ids or [])

    try:
        update_post(session, post, changes=changes, tags=tags)
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise _integrity_error(exc) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise database_error("Failed to update post", exc) from exc

    return get_post_service(session, post_id)


def delete_post_service(session: Session, post_id: int) -> None:
    """Delete an existing post."""
    post = get_post_service(session, post_id)
    try:
        delete_post(session, post)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise database_error("Failed to delete post", exc) from exc
    logger.info("Deleted post id=%s", post_id)
