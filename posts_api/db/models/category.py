"""SQLAlchemy model for post categories."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer
from sqlalchemy import PrimaryKeyConstraint
from sqlalchemy import String
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column
from sqlalchemy.orm import relationship

from posts_api.db.models.user import Base

if TYPE_CHECKING:
    from posts_api.db.models.post import Post


class Category(Base):
    """Post category such as "Writing" or "Books"."""

    __tablename__ = "categories"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_categories"),
        UniqueConstraint("name", name="uq_categories_name"),
        UniqueConstraint("slug", name="uq_categories_slug"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)

    posts: Mapped[list["Post"]] = relationship("Post", back_populates="category")
