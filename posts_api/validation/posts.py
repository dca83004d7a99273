"""Request validators for the posts API."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from posts_api.core.errors import FieldError
from posts_api.schemas.post import SORT_FIELDS
from posts_api.schemas.post import SORT_ORDERS
from posts_api.schemas.post import PostCreate
from posts_api.schemas.post import PostListQuery
from posts_api.schemas.post import PostUpdate
from posts_api.utils.pagination import MAX_PAGE_SIZE
from posts_api.validation.base import BaseValidator
from posts_api.validation.base import check_choice
from posts_api.validation.base import check_id_array
from posts_api.validation.base import check_integer_list_string
from posts_api.validation.base import check_positive_integer
from posts_api.validation.base import check_query_integer
from posts_api.validation.base import check_string
from posts_api.validation.base import check_url

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 500
READ_TIME_MAX_LENGTH = 50
SEARCH_MAX_LENGTH = 255


def _validate_post_fields(
    data: Mapping[str, Any],
    errors: list[FieldError],
    *,
    required: bool,
) -> tuple[dict[str, Any], list[int] | None]:
    values: dict[str, Any] = {
        "title": check_string(
            data, "title", "Title", errors, required=required, non_empty=True, max_length=TITLE_MAX_LENGTH
        ),
        "content": check_string(data, "content", "Content", errors, required=required, non_empty=True),
        "category_id": check_positive_integer(data, "categoryId", "Category ID", errors, required=required),
        "description": check_string(
            data, "description", "Description", errors, max_length=DESCRIPTION_MAX_LENGTH
        ),
        "cover_image_url": check_url(data, "coverImageUrl", "Cover image URL", errors),
    }
    tag_ids = check_id_array(data, "tagIds", "Tag IDs", errors)
    values["read_time"] = check_string(
        data, "readTime", "Read time", errors, max_length=READ_TIME_MAX_LENGTH
    )
    return {key: value for key, value in values.items() if value is not None}, tag_ids


class CreatePostValidator(BaseValidator[PostCreate]):
    model = PostCreate

    def validate_fields(self, data: Mapping[str, Any], errors: list[FieldError]) -> dict[str, Any]:
        values, tag_ids = _validate_post_fields(data, errors, required=True)
        if tag_ids:
            values["tag_ids"] = tag_ids
        return values


class UpdatePostValidator(BaseValidator[PostUpdate]):
    """All fields are optional, but provided fields must be valid.

    Unlike creation, a provided ``tagIds`` is always assigned, even when no id
    survived filtering, so an update can clear a post's tags.
    """

    model = PostUpdate

    def validate_fields(self, data: Mapping[str, Any], errors: list[FieldError]) -> dict[str, Any]:
        values, tag_ids = _validate_post_fields(data, errors, required=False)
        if tag_ids is not None:
            values["tag_ids"] = tag_ids
        return values


class ListPostsQueryValidator(BaseValidator[PostListQuery]):
    model = PostListQuery
    root_message = "Query parameters must be an object"

    def validate_fields(self, data: Mapping[str, Any], errors: list[FieldError]) -> dict[str, Any]:
        values: dict[str, Any] = {
            "page": check_query_integer(data, "page", "Page", errors),
            "limit": check_query_integer(data, "limit", "Limit", errors, maximum=MAX_PAGE_SIZE),
            "category_id": check_query_integer(data, "categoryId", "Category ID", errors),
            "tag_ids": check_integer_list_string(data, "tagIds", "Tag IDs", errors),
            "author_id": check_string(data, "authorId", "Author ID", errors, non_empty=True),
            "search": check_string(
                data, "search", "Search", errors, non_empty=True, max_length=SEARCH_MAX_LENGTH
            ),
            "sort_by": check_choice(data, "sortBy", "Sort by", SORT_FIELDS, errors),
            "sort_order": check_choice(data, "sortOrder", "Sort order", SORT_ORDERS, errors),
        }
        return {key: value for key, value in values.items() if value is not None}


create_post_validator = CreatePostValidator()
update_post_validator = UpdatePostValidator()
list_posts_query_validator = ListPostsQueryValidator()
