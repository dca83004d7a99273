"""SQLAlchemy model for tags and the post/tag association table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Column
from sqlalchemy import ForeignKey
from sqlalchemy import Integer
from sqlalchemy import PrimaryKeyConstraint
from sqlalchemy import String
from sqlalchemy import Table
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column
from sqlalchemy.orm import relationship

from posts_api.db.models.user import Base

if TYPE_CHECKING:
    from posts_api.db.models.post import Post


posts_to_tags = Table(
    "posts_to_tags",
    Base.metadata,
    Column(
        "post_id",
        Integer,
        ForeignKey("posts.id", name="fk_posts_to_tags_post_id_posts", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", name="fk_posts_to_tags_tag_id_tags", ondelete="CASCADE"),
        nullable=False,
    ),
    PrimaryKeyConstraint("post_id", "tag_id", name="pk_posts_to_tags"),
)


class Tag(Base):
    """Free-form label attached to posts."""

    __tablename__ = "tags"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_tags"),
        UniqueConstraint("name", name="uq_tags_name"),
        UniqueConstraint("slug", name="uq_tags_slug"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)

    posts: Mapped[list["Post"]] = relationship("Post", secondary=posts_to_tags, back_populates="tags")
