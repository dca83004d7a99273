"""Unit tests for slug and pagination helpers."""

from __future__ import annotations

import pytest

from posts_api.utils.pagination import Pagination
from posts_api.utils.pagination import paginate
from posts_api.utils.slugs import slugify
from posts_api.utils.slugs import unique_slug


@pytest.mark.parametrize(
    ("title", "slug"),
    [
        ("Hello World", "hello-world"),
        ("  Spaces   everywhere  ", "spaces-everywhere"),
        ("Crème brûlée & café", "creme-brulee-cafe"),
        ("C++ / Rust: a tale", "c-rust-a-tale"),
        ("!!!", "post"),
    ],
)
def test_slugify(title: str, slug: str) -> None:
    assert slugify(title) == slug


def test_unique_slug_appends_first_free_suffix() -> None:
    assert unique_slug("Hello World") == "hello-world"
    assert unique_slug("Hello World", ["hello-world"]) == "hello-world-2"
    assert unique_slug("Hello World", ["hello-world", "hello-world-2", "hello-world-4"]) == "hello-world-3"


def test_paginate_computes_offset_and_page_count() -> None:
    assert paginate(1, 20, 45) == Pagination(offset=0, limit=20, page=1, total_pages=3)
    assert paginate(3, 20, 45) == Pagination(offset=40, limit=20, page=3, total_pages=3)
    assert paginate(1, 10, 0).total_pages == 0


@pytest.mark.parametrize(("page", "limit"), [(0, 10), (1, 0)])
def test_paginate_rejects_non_positive_window(page: int, limit: int) -> None:
    with pytest.raises(ValueError):
        paginate(page, limit, 10)
