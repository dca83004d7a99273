"""Shared pytest fixtures for posts API test suites."""

from collections.abc import Generator
import os
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Settings are cached on first import; keep the suite off the Postgres default.
os.environ.setdefault("POSTS_DATABASE_URL", "sqlite+pysqlite:///:memory:")

AUTHOR_ID = "author-1"


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine shared by every connection of one test."""
    from posts_api.db.models import Base

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, class_=Session)


@pytest.fixture
def seeded(session_factory: sessionmaker) -> dict[str, object]:
    """Insert one author, two categories and three tags."""
    from posts_api.db.models import Category
    from posts_api.db.models import Tag
    from posts_api.db.models import User

    with session_factory() as session:
        session.add(User(id=AUTHOR_ID, name="Ada", email="ada@example.com"))
        writing = Category(name="Writing", slug="writing")
        books = Category(name="Books", slug="books")
        tags = [
            Tag(name="Python", slug="python"),
            Tag(name="APIs", slug="apis"),
            Tag(name="Testing", slug="testing"),
        ]
        session.add_all([writing, books, *tags])
        session.commit()
        return {
            "author_id": AUTHOR_ID,
            "category_id": writing.id,
            "other_category_id": books.id,
            "tag_ids": [tag.id for tag in tags],
        }


@pytest.fixture
def client(session_factory: sessionmaker, seeded: dict[str, object]) -> Generator[TestClient, None, None]:
    """Provide an API test client bound to the seeded in-memory database."""
    from posts_api.db.base import get_db_session
    from posts_api.main import app

    def _session_override() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = _session_override
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
