"""Paging defaults and offset arithmetic for list endpoints."""

from __future__ import annotations

from dataclasses import dataclass
import math

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
DEFAULT_SORT_FIELD = "publishedAt"
DEFAULT_SORT_ORDER = "desc"


@dataclass(frozen=True)
class Pagination:
    """Resolved window for one page of results."""

    offset: int
    limit: int
    page: int
    total_pages: int


def paginate(page: int, limit: int, total: int) -> Pagination:
    """Compute offset and page count for a 1-based page of ``limit`` rows."""
    if page < 1:
        raise ValueError("page must be >= 1")
    if limit < 1:
        raise ValueError("limit must be >= 1")
    return Pagination(
        offset=(page - 1) * limit,
        limit=limit,
        page=page,
        total_pages=math.ceil(total / limit) if total > 0 else 0,
    )
