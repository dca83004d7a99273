"""Lookups for the entities a post references."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from posts_api.db.models.category import Category
from posts_api.db.models.tag import Tag
from posts_api.db.models.user import User

# Integer primary keys are 32-bit INTEGER columns on Postgres.
MAX_INTEGER_ID = 2_147_483_647


def is_storable_id(value: int) -> bool:
    """True when ``value`` fits an integer primary key column."""
    return 0 < value <= MAX_INTEGER_ID


def get_user(session: Session, user_id: str) -> User | None:
    """Fetch a user by id."""
    return session.get(User, user_id)


def get_category(session: Session, category_id: int) -> Category | None:
    """Fetch a category by id; ids outside the column range never match."""
    if not is_storable_id(category_id):
        return None
    return session.get(Category, category_id)


def get_tags(session: Session, tag_ids: Sequence[int]) -> list[Tag]:
    """Fetch the tags whose ids are in ``tag_ids``, ordered by id."""
    storable = [tag_id for tag_id in tag_ids if is_storable_id(tag_id)]
    if not storable:
        return []
    stmt = select(Tag).where(Tag.id.in_(storable)).order_by(Tag.id)
    return list(session.scalars(stmt))
