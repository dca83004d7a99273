"""Repository primitives for post entities."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from datetime import datetime
from datetime import timezone
from typing import Any

from sqlalchemy import ColumnElement
from sqlalchemy import Select
from sqlalchemy import false
from sqlalchemy import func
from sqlalchemy import or_
from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm import selectinload

from posts_api.db.models.post import Post
from posts_api.db.models.tag import Tag
from posts_api.db.models.tag import posts_to_tags
from posts_api.db.repository.references import is_storable_id

UNSET = object()

_SORT_COLUMNS = {
    "publishedAt": Post.published_at,
    "createdAt": Post.created_at,
    "title": Post.title,
}

_UPDATABLE_COLUMNS = frozenset(
    {"title", "content", "category_id", "description", "cover_image_url", "read_time"}
)


def _post_query() -> Select:
    return (
        select(Post)
        .options(
            selectinload(Post.author),
            selectinload(Post.category),
            selectinload(Post.tags),
        )
        .execution_options(populate_existing=True)
    )


def get_post(session: Session, post_id: int) -> Post | None:
    """Fetch a post with its author, category and tags."""
    if not is_storable_id(post_id):
        return None
    return session.scalars(_post_query().where(Post.id == post_id)).first()


def _filters(
    *,
    category_id: int | None,
    tag_ids: Sequence[int] | None,
    author_id: str | None,
    search: str | None,
) -> list[ColumnElement[bool]]:
    conditions: list[ColumnElement[bool]] = []
    if category_id is not None:
        conditions.append(Post.category_id == category_id if is_storable_id(category_id) else false())
    if tag_ids:
        storable = [tag_id for tag_id in tag_ids if is_storable_id(tag_id)]
        if storable:
            tagged = select(posts_to_tags.c.post_id).where(posts_to_tags.c.tag_id.in_(storable))
            conditions.append(Post.id.in_(tagged))
        else:
            conditions.append(false())
    if author_id is not None:
        conditions.append(Post.author_id == author_id)
    if search:
        conditions.append(
            or_(
                Post.title.icontains(search, autoescape=True),
                Post.content.icontains(search, autoescape=True),
            )
        )
    return conditions


def count_posts(
    session: Session,
    *,
    category_id: int | None = None,
    tag_ids: Sequence[int] | None = None,
    author_id: str | None = None,
    search: str | None = None,
) -> int:
    """Count posts matching the list filters."""
    conditions = _filters(category_id=category_id, tag_ids=tag_ids, author_id=author_id, search=search)
    stmt = select(func.count()).select_from(Post).where(*conditions)
    return session.scalar(stmt) or 0


def list_posts(
    session: Session,
    *,
    category_id: int | None = None,
    tag_ids: Sequence[int] | None = None,
    author_id: str | None = None,
    search: str | None = None,
    sort_by: str = "publishedAt",
    sort_order: str = "desc",
    limit: int = 20,
    offset: int = 0,
) -> list[Post]:
    """List one window of posts matching the filters."""
    conditions = _filters(category_id=category_id, tag_ids=tag_ids, author_id=author_id, search=search)
    column = _SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order == "asc" else column.desc()
    tiebreak = Post.id.asc() if sort_order == "asc" else Post.id.desc()
    stmt = _post_query().where(*conditions).order_by(ordering, tiebreak).limit(limit).offset(offset)
    return list(session.scalars(stmt))


def list_slugs_with_prefix(session: Session, prefix: str) -> list[str]:
    """Return existing slugs that equal ``prefix`` or extend it with a suffix."""
    stmt = select(Post.slug).where(or_(Post.slug == prefix, Post.slug.like(f"{prefix}-%")))
    return list(session.scalars(stmt))


def create_post(
    session: Session,
    *,
    title: str,
    slug: str,
    content: str,
    author_id: str,
    category_id: int,
    description: str | None = None,
    cover_image_url: str | None = None,
    read_time: str | None = None,
    tags: Sequence[Tag] = (),
) -> Post:
    """Create and return a post row."""
    post = Post(
        title=title,
        slug=slug,
        content=content,
        author_id=author_id,
        category_id=category_id,
        description=description,
        cover_image_url=cover_image_url,
        read_time=read_time,
        tags=list(tags),
    )
    session.add(post)
    session.flush()
    session.refresh(post)
    return post


def update_post(
    session: Session,
    post: Post,
    *,
    changes: Mapping[str, Any],
    tags: Sequence[Tag] | object = UNSET,
) -> Post:
    """Apply column changes, and replace tags when given, then stamp ``updated_at``."""
    unknown = set(changes) - _UPDATABLE_COLUMNS
    if unknown:
        raise ValueError(f"Unsupported post fields: {', '.join(sorted(unknown))}")

    for name, value in changes.items():
        setattr(post, name, value)
    if tags is not UNSET:
        post.tags = list(tags)
    post.updated_at = datetime.now(timezone.utc)
    session.flush()
    session.refresh(post)
    return post


def delete_post(session: Session, post: Post) -> None:
    """Delete a post; its tag links go with it."""
    session.delete(post)
    session.flush()
