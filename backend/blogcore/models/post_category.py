"""PostCategory ORM — one category label attached to a post.

Invariants:
    - Always belongs to a post (post_id FK, cascades on delete)
    - position preserves the author's ordering of categories
"""

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogcore.db.base import Base


class PostCategoryRow(Base):
    """Row in the post_categories table."""
    __tablename__ = "post_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    post: Mapped["PostRow"] = relationship("PostRow", back_populates="categories")
