"""SQL Backend — posts in a relational database through SQLAlchemy async ORM.

Invariants:
    - Works unchanged on SQLite (aiosqlite) and PostgreSQL (asyncpg)
    - persist is an upsert by id; categories are rewritten in author order
    - erase of a missing row is a no-op
    - Database failures surface as PersistenceError (via DatabaseSessionManager)

Design Decisions:
    - Rows converted to frozen Post values at the boundary: ORM objects never
      reach the cache
    - Attachments go to the shared FileStore, not to BLOB columns
"""

import logging

from sqlalchemy import select

from blogcore.core.domain_types import PostId, Slug
from blogcore.core.post import Post, as_utc
from blogcore.infrastructure.database import DatabaseSessionManager
from blogcore.infrastructure.file_store import FileStore
from blogcore.models.post import PostRow
from blogcore.models.post_category import PostCategoryRow

logger = logging.getLogger(__name__)


def row_to_post(row: PostRow) -> Post:
    return Post(
        id=PostId(row.id),
        slug=Slug(row.slug),
        title=row.title,
        excerpt=row.excerpt,
        content=row.content,
        pub_date=as_utc(row.pub_date),
        last_modified=as_utc(row.last_modified),
        is_published=row.is_published,
        categories=tuple(c.name for c in row.categories),
    )


def _apply(row: PostRow, post: Post) -> None:
    row.slug = post.slug
    row.title = post.title
    row.excerpt = post.excerpt
    row.content = post.content
    row.pub_date = post.pub_date
    row.last_modified = post.last_modified
    row.is_published = post.is_published
    row.categories = [
        PostCategoryRow(name=name, position=i)
        for i, name in enumerate(post.categories)
    ]


class SqlBackend:
    """PostBackend backed by a SQL database."""

    name = "sql"

    def __init__(self, db: DatabaseSessionManager, file_store: FileStore):
        self.db = db
        self.file_store = file_store

    async def load_all(self) -> list[Post]:
        async with self.db.session() as db:
            result = await db.execute(select(PostRow))
            return [row_to_post(row) for row in result.scalars().all()]

    async def persist(self, post: Post) -> None:
        async with self.db.session() as db:
            row = await db.get(PostRow, post.id)
            if row is None:
                row = PostRow(id=post.id)
                db.add(row)
            _apply(row, post)
            await db.commit()
        logger.debug("Post row written", extra={"post_id": post.id})

    async def erase(self, post: Post) -> None:
        async with self.db.session() as db:
            row = await db.get(PostRow, post.id)
            if row is None:
                return
            await db.delete(row)
            await db.commit()
        logger.debug("Post row deleted", extra={"post_id": post.id})

    async def store_file(
        self, data: bytes, file_name: str, suffix: str | None = None,
    ) -> str:
        return await self.file_store.store(data, file_name, suffix)
