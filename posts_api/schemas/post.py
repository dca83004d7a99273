"""Pydantic schemas for post API payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

SortField = Literal["publishedAt", "createdAt", "title"]
SortOrder = Literal["asc", "desc"]

SORT_FIELDS: tuple[str, ...] = ("publishedAt", "createdAt", "title")
SORT_ORDERS: tuple[str, ...] = ("asc", "desc")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PostCreate(_CamelModel):
    """Sanitized payload to create a post."""

    title: str
    content: str
    category_id: int
    description: str | None = None
    cover_image_url: str | None = None
    tag_ids: list[int] | None = None
    read_time: str | None = None


class PostUpdate(_CamelModel):
    """Sanitized payload to update mutable post fields."""

    title: str | None = None
    content: str | None = None
    category_id: int | None = None
    description: str | None = None
    cover_image_url: str | None = None
    tag_ids: list[int] | None = None
    read_time: str | None = None


class PostListQuery(_CamelModel):
    """Sanitized list filters, paging and sort options."""

    page: int | None = None
    limit: int | None = None
    category_id: int | None = None
    tag_ids: list[int] | None = None
    author_id: str | None = None
    search: str | None = None
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None


class AuthorSummary(_CamelModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str | None = None
    email: str


class CategorySummary(_CamelModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    slug: str


class TagSummary(_CamelModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    slug: str


class Post(_CamelModel):
    """Post response payload with its relations."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    slug: str
    content: str | None = None
    description: str | None = None
    cover_image_url: str | None = None
    read_time: str | None = None
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: AuthorSummary
    category: CategorySummary
    tags: list[TagSummary]


class PaginationMeta(_CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PostListResponse(_CamelModel):
    """Paginated list envelope for posts."""

    data: list[Post]
    pagination: PaginationMeta
