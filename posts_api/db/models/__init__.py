"""Model module imports for SQLAlchemy relationship registration."""

from posts_api.db.models.category import Category
from posts_api.db.models.post import Post
from posts_api.db.models.tag import Tag
from posts_api.db.models.tag import posts_to_tags
from posts_api.db.models.user import Base
from posts_api.db.models.user import User

__all__ = [
    "Base",
    "Category",
    "Post",
    "Tag",
    "User",
    "posts_to_tags",
]
