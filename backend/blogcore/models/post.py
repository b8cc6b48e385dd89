"""Post ORM — persisted form of a blog entry.

Invariants:
    - id is the post's opaque string id (assigned before persist, not by the DB)
    - slug is unique
    - pub_date / last_modified stored timezone-aware (SQLite drops tzinfo on read)

Design Decisions:
    - categories in a child table: keeps the display spelling per row and
      lets SQL filter by category if ever needed
    - cascade delete-orphan: replacing the list rewrites the child rows
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogcore.db.base import Base


class PostRow(Base):
    """Row in the posts table."""
    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    excerpt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    pub_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    last_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    is_published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )

    categories: Mapped[list["PostCategoryRow"]] = relationship(
        "PostCategoryRow", back_populates="post",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="PostCategoryRow.position",
    )
