"""Contract tests for the posts API endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

API_PREFIX = "/api/v1"
AUTHOR_HEADERS = {"X-Author-Id": "author-1"}
HUGE_ID = 10**30


def _assert_error_envelope(payload: dict, code: str) -> None:
    assert "error" in payload
    error = payload["error"]
    assert error["code"] == code
    assert isinstance(error.get("message"), str) and error["message"]
    if "details" in error:
        assert isinstance(error["details"], dict)
        for messages in error["details"].values():
            assert isinstance(messages, list)
            assert all(isinstance(message, str) for message in messages)


def _assert_post_contract(payload: dict) -> None:
    for field in (
        "id",
        "title",
        "slug",
        "content",
        "description",
        "coverImageUrl",
        "readTime",
        "publishedAt",
        "createdAt",
        "updatedAt",
        "author",
        "category",
        "tags",
    ):
        assert field in payload
    assert set(payload["author"]) == {"id", "name", "email"}
    assert set(payload["category"]) == {"id", "name", "slug"}


def _create(client: TestClient, seeded: dict, **overrides) -> dict:
    body = {"title": "Hello World", "content": "Body", "categoryId": seeded["category_id"]}
    body.update(overrides)
    response = client.post(f"{API_PREFIX}/posts", json=body, headers=AUTHOR_HEADERS)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_post_returns_created_post_with_relations(client: TestClient, seeded: dict) -> None:
    tag_ids = seeded["tag_ids"]

    payload = _create(
        client,
        seeded,
        title="  Hello World  ",
        description=" Intro ",
        coverImageUrl="https://cdn.example.com/a.png",
        readTime="4 min",
        tagIds=[tag_ids[1], -5, tag_ids[0]],
    )

    _assert_post_contract(payload)
    assert payload["title"] == "Hello World"
    assert payload["slug"] == "hello-world"
    assert payload["description"] == "Intro"
    assert payload["author"]["id"] == "author-1"
    assert payload["category"]["slug"] == "writing"
    assert [tag["id"] for tag in payload["tags"]] == sorted(tag_ids[:2])
    assert payload["publishedAt"] is not None


def test_duplicate_titles_get_suffixed_slugs(client: TestClient, seeded: dict) -> None:
    first = _create(client, seeded)
    second = _create(client, seeded)
    third = _create(client, seeded)

    assert [first["slug"], second["slug"], third["slug"]] == ["hello-world", "hello-world-2", "hello-world-3"]


def test_create_post_reports_all_field_errors(client: TestClient) -> None:
    response = client.post(
        f"{API_PREFIX}/posts",
        json={"title": "", "categoryId": 0, "tagIds": ["x"]},
        headers=AUTHOR_HEADERS,
    )

    assert response.status_code == 400
    payload = response.json()
    _assert_error_envelope(payload, "VALIDATION_ERROR")
    assert payload["error"]["details"] == {
        "title": ["Title is required"],
        "content": ["Content is required"],
        "categoryId": ["Category ID must be a positive number"],
        "tagIds[0]": ["Tag ID must be a number"],
    }


def test_create_post_requires_author_header(client: TestClient, seeded: dict) -> None:
    response = client.post(
        f"{API_PREFIX}/posts",
        json={"title": "Hi", "content": "Body", "categoryId": seeded["category_id"]},
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"authorId": ["Author ID is required"]}


def test_create_post_rejects_non_object_and_malformed_bodies(client: TestClient) -> None:
    as_list = client.post(f"{API_PREFIX}/posts", json=["title"], headers=AUTHOR_HEADERS)
    malformed = client.post(
        f"{API_PREFIX}/posts",
        content=b"{not json",
        headers={**AUTHOR_HEADERS, "Content-Type": "application/json"},
    )

    assert as_list.status_code == 400
    assert as_list.json()["error"]["details"] == {"root": ["Request body must be an object"]}
    assert malformed.status_code == 400
    _assert_error_envelope(malformed.json(), "VALIDATION_ERROR")
    assert "root" in malformed.json()["error"]["details"]


def test_create_post_with_unknown_references(client: TestClient, seeded: dict) -> None:
    bad_category = client.post(
        f"{API_PREFIX}/posts",
        json={"title": "Hi", "content": "Body", "categoryId": 999},
        headers=AUTHOR_HEADERS,
    )
    bad_tags = client.post(
        f"{API_PREFIX}/posts",
        json={"title": "Hi", "content": "Body", "categoryId": seeded["category_id"], "tagIds": [998, 999]},
        headers=AUTHOR_HEADERS,
    )
    bad_author = client.post(
        f"{API_PREFIX}/posts",
        json={"title": "Hi", "content": "Body", "categoryId": seeded["category_id"]},
        headers={"X-Author-Id": "ghost"},
    )

    assert bad_category.status_code == 400
    assert bad_category.json() == {
        "error": {
            "message": "Referenced categoryId with value 999 does not exist",
            "code": "FOREIGN_KEY_CONSTRAINT",
            "details": {"categoryId": ["Referenced categoryId does not exist"]},
        }
    }
    assert bad_tags.status_code == 400
    assert bad_tags.json()["error"]["message"] == "Referenced tagIds with value 998, 999 does not exist"
    assert bad_author.status_code == 400
    assert bad_author.json()["error"]["details"] == {"authorId": ["Referenced authorId does not exist"]}


def test_get_post_and_not_found(client: TestClient, seeded: dict) -> None:
    created = _create(client, seeded)

    found = client.get(f"{API_PREFIX}/posts/{created['id']}")
    missing = client.get(f"{API_PREFIX}/posts/999")

    assert found.status_code == 200
    assert found.json() == created
    assert missing.status_code == 404
    assert missing.json() == {"error": {"message": "Post with ID 999 not found", "code": "NOT_FOUND"}}


def test_non_integer_post_id_is_a_validation_error(client: TestClient) -> None:
    response = client.get(f"{API_PREFIX}/posts/abc")

    assert response.status_code == 400
    _assert_error_envelope(response.json(), "VALIDATION_ERROR")
    assert "post_id" in response.json()["error"]["details"]


def test_update_post_changes_only_provided_fields(client: TestClient, seeded: dict) -> None:
    created = _create(client, seeded, description="Original", tagIds=seeded["tag_ids"])

    response = client.patch(
        f"{API_PREFIX}/posts/{created['id']}",
        json={"title": " Renamed ", "categoryId": seeded["other_category_id"]},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["title"] == "Renamed"
    assert payload["slug"] == created["slug"]
    assert payload["description"] == "Original"
    assert payload["category"]["slug"] == "books"
    assert len(payload["tags"]) == 3
    assert payload["updatedAt"] is not None


def test_update_post_with_empty_tag_ids_clears_tags(client: TestClient, seeded: dict) -> None:
    created = _create(client, seeded, tagIds=seeded["tag_ids"])

    response = client.patch(f"{API_PREFIX}/posts/{created['id']}", json={"tagIds": []})

    assert response.status_code == 200
    assert response.json()["tags"] == []


def test_update_post_validation_and_missing_post(client: TestClient, seeded: dict) -> None:
    created = _create(client, seeded)

    invalid = client.patch(f"{API_PREFIX}/posts/{created['id']}", json={"title": "   "})
    missing = client.patch(f"{API_PREFIX}/posts/999", json={"title": "New"})
    bad_category = client.patch(f"{API_PREFIX}/posts/{created['id']}", json={"categoryId": 999})

    assert invalid.status_code == 400
    assert invalid.json()["error"]["details"] == {"title": ["Title cannot be empty"]}
    assert missing.status_code == 404
    assert bad_category.status_code == 400
    _assert_error_envelope(bad_category.json(), "FOREIGN_KEY_CONSTRAINT")


def test_delete_post(client: TestClient, seeded: dict) -> None:
    created = _create(client, seeded, tagIds=seeded["tag_ids"])

    deleted = client.delete(f"{API_PREFIX}/posts/{created['id']}")
    again = client.delete(f"{API_PREFIX}/posts/{created['id']}")
    fetched = client.get(f"{API_PREFIX}/posts/{created['id']}")

    assert deleted.status_code == 204
    assert deleted.content == b""
    assert again.status_code == 404
    assert fetched.status_code == 404


def test_list_posts_paginates_and_filters(client: TestClient, seeded: dict) -> None:
    tag_ids = seeded["tag_ids"]
    _create(client, seeded, title="Alpha", content="About python", tagIds=[tag_ids[0]])
    _create(client, seeded, title="Beta", content="Other", tagIds=[tag_ids[1]])
    _create(client, seeded, title="Gamma", content="More", categoryId=seeded["other_category_id"])

    page = client.get(f"{API_PREFIX}/posts", params={"limit": "2", "sortBy": "title", "sortOrder": "asc"})
    second = client.get(
        f"{API_PREFIX}/posts",
        params={"limit": "2", "page": "2", "sortBy": "title", "sortOrder": "asc"},
    )
    by_tag = client.get(f"{API_PREFIX}/posts", params={"tagIds": f"{tag_ids[1]},x"})
    by_category = client.get(f"{API_PREFIX}/posts", params={"categoryId": str(seeded["other_category_id"])})
    by_search = client.get(f"{API_PREFIX}/posts", params={"search": "PYTHON"})

    assert page.status_code == 200
    body = page.json()
    assert [post["title"] for post in body["data"]] == ["Alpha", "Beta"]
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}
    assert [post["title"] for post in second.json()["data"]] == ["Gamma"]
    assert [post["title"] for post in by_tag.json()["data"]] == ["Beta"]
    assert [post["title"] for post in by_category.json()["data"]] == ["Gamma"]
    assert [post["title"] for post in by_search.json()["data"]] == ["Alpha"]


def test_list_posts_defaults(client: TestClient, seeded: dict) -> None:
    _create(client, seeded)

    response = client.get(f"{API_PREFIX}/posts")

    assert response.status_code == 200
    assert response.json()["pagination"] == {"page": 1, "limit": 20, "total": 1, "totalPages": 1}


def test_list_posts_rejects_invalid_query(client: TestClient) -> None:
    response = client.get(
        f"{API_PREFIX}/posts",
        params={"limit": "500", "sortBy": "views", "tagIds": "x,y"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {
        "limit": ["Limit cannot exceed 100"],
        "tagIds": ["Tag IDs must be valid integers"],
        "sortBy": ["Sort by must be one of: publishedAt, createdAt, title"],
    }


def test_out_of_range_reference_ids_are_foreign_key_errors(client: TestClient, seeded: dict) -> None:
    bad_category = client.post(
        f"{API_PREFIX}/posts",
        json={"title": "Hi", "content": "Body", "categoryId": HUGE_ID},
        headers=AUTHOR_HEADERS,
    )
    bad_tags = client.post(
        f"{API_PREFIX}/posts",
        json={"title": "Hi", "content": "Body", "categoryId": seeded["category_id"], "tagIds": [HUGE_ID]},
        headers=AUTHOR_HEADERS,
    )
    created = _create(client, seeded)
    bad_update = client.patch(f"{API_PREFIX}/posts/{created['id']}", json={"categoryId": HUGE_ID})

    assert bad_category.status_code == 400
    assert bad_category.json()["error"] == {
        "message": f"Referenced categoryId with value {HUGE_ID} does not exist",
        "code": "FOREIGN_KEY_CONSTRAINT",
        "details": {"categoryId": ["Referenced categoryId does not exist"]},
    }
    assert bad_tags.status_code == 400
    _assert_error_envelope(bad_tags.json(), "FOREIGN_KEY_CONSTRAINT")
    assert bad_update.status_code == 400
    _assert_error_envelope(bad_update.json(), "FOREIGN_KEY_CONSTRAINT")


def test_out_of_range_post_ids_are_not_found(client: TestClient) -> None:
    fetched = client.get(f"{API_PREFIX}/posts/{HUGE_ID}")
    updated = client.patch(f"{API_PREFIX}/posts/{HUGE_ID}", json={"title": "New"})
    deleted = client.delete(f"{API_PREFIX}/posts/{HUGE_ID}")

    for response in (fetched, updated, deleted):
        assert response.status_code == 404
        assert response.json() == {
            "error": {"message": f"Post with ID {HUGE_ID} not found", "code": "NOT_FOUND"}
        }


def test_list_posts_with_out_of_range_values_returns_empty_page(client: TestClient, seeded: dict) -> None:
    _create(client, seeded)

    far_page = client.get(f"{API_PREFIX}/posts", params={"page": str(HUGE_ID)})
    huge_category = client.get(f"{API_PREFIX}/posts", params={"categoryId": str(HUGE_ID)})
    huge_tag = client.get(f"{API_PREFIX}/posts", params={"tagIds": str(HUGE_ID)})

    assert far_page.status_code == 200
    assert far_page.json()["data"] == []
    assert far_page.json()["pagination"] == {"page": HUGE_ID, "limit": 20, "total": 1, "totalPages": 1}
    for response in (huge_category, huge_tag):
        assert response.status_code == 200
        assert response.json()["data"] == []
        assert response.json()["pagination"]["total"] == 0


def test_list_posts_past_last_page_is_empty(client: TestClient, seeded: dict) -> None:
    _create(client, seeded)

    response = client.get(f"{API_PREFIX}/posts", params={"page": "2", "limit": "1"})

    assert response.status_code == 200
    assert response.json()["data"] == []
    assert response.json()["pagination"] == {"page": 2, "limit": 1, "total": 1, "totalPages": 1}


def test_list_posts_search_matches_wildcards_literally(client: TestClient, seeded: dict) -> None:
    _create(client, seeded, title="Hi", content="Plain body")
    _create(client, seeded, title="50% off", content="Sale")

    percent = client.get(f"{API_PREFIX}/posts", params={"search": "%"})
    underscore = client.get(f"{API_PREFIX}/posts", params={"search": "_"})

    assert [post["title"] for post in percent.json()["data"]] == ["50% off"]
    assert underscore.json()["data"] == []
    assert underscore.json()["pagination"]["total"] == 0
