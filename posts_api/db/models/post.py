"""SQLAlchemy model for blog posts."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime
from sqlalchemy import ForeignKey
from sqlalchemy import Index
from sqlalchemy import Integer
from sqlalchemy import PrimaryKeyConstraint
from sqlalchemy import String
from sqlalchemy import Text
from sqlalchemy import UniqueConstraint
from sqlalchemy import func
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column
from sqlalchemy.orm import relationship

from posts_api.db.models.tag import posts_to_tags
from posts_api.db.models.user import Base

if TYPE_CHECKING:
    from posts_api.db.models.category import Category
    from posts_api.db.models.tag import Tag
    from posts_api.db.models.user import User


class Post(Base):
    """Blog post owned by an author and filed under one category."""

    __tablename__ = "posts"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_posts"),
        UniqueConstraint("slug", name="uq_posts_slug"),
        Index("ix_posts_category_id", "category_id"),
        Index("ix_posts_author_id", "author_id"),
        Index("ix_posts_published_at", "published_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    cover_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    read_time: Mapped[str | None] = mapped_column(String(50), nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        server_default=func.now(),
    )
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    author_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("users.id", name="fk_posts_author_id_users", ondelete="CASCADE"),
        nullable=False,
    )
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id", name="fk_posts_category_id_categories", ondelete="RESTRICT"),
        nullable=False,
    )

    author: Mapped["User"] = relationship("User", back_populates="posts")
    category: Mapped["Category"] = relationship("Category", back_populates="posts")
    tags: Mapped[list["Tag"]] = relationship(
        "Tag",
        secondary=posts_to_tags,
        back_populates="posts",
        order_by="Tag.id",
    )
