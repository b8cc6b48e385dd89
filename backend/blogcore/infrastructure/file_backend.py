"""Flat-File Backend — one JSON document per post under content_dir.

Invariants:
    - File name is <post id>.json; the id inside the document is authoritative
    - Writes are atomic: temp file in the same directory, then os.replace
    - Erasing a missing document is a no-op
    - Unreadable documents are skipped at load time (logged), never fatal
    - OSError on write/erase mapped to PersistenceError

Design Decisions:
    - JSON over XML: standard library, human-editable, diff-friendly
    - Blocking IO runs in asyncio.to_thread: keeps the event loop free
"""

import asyncio
import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from blogcore.core.domain_types import PostId, Slug
from blogcore.core.errors import ErrorContext, PersistenceError
from blogcore.core.post import Post
from blogcore.infrastructure.file_store import FileStore

logger = logging.getLogger(__name__)


def post_to_document(post: Post) -> dict:
    return {
        "id": post.id,
        "slug": post.slug,
        "title": post.title,
        "excerpt": post.excerpt,
        "content": post.content,
        "pub_date": post.pub_date.isoformat(),
        "last_modified": post.last_modified.isoformat(),
        "is_published": post.is_published,
        "categories": list(post.categories),
    }


def post_from_document(doc: dict) -> Post:
    return Post(
        id=PostId(doc["id"]),
        slug=Slug(doc["slug"]),
        title=doc.get("title", ""),
        excerpt=doc.get("excerpt", ""),
        content=doc.get("content", ""),
        pub_date=datetime.fromisoformat(doc["pub_date"]),
        last_modified=datetime.fromisoformat(
            doc.get("last_modified") or doc["pub_date"],
        ),
        is_published=bool(doc.get("is_published", True)),
        categories=tuple(doc.get("categories", ())),
    )


class FileBackend:
    """PostBackend storing posts as JSON documents on disk."""

    name = "file"

    def __init__(self, content_dir: str | Path, file_store: FileStore):
        self.content_dir = Path(content_dir)
        self.file_store = file_store

    def _path_for(self, post_id: str) -> Path:
        return self.content_dir / f"{post_id}.json"

    async def load_all(self) -> list[Post]:
        return await asyncio.to_thread(self._load_all_sync)

    def _load_all_sync(self) -> list[Post]:
        if not self.content_dir.is_dir():
            return []
        posts = []
        for path in sorted(self.content_dir.glob("*.json")):
            try:
                with open(path, encoding="utf-8") as f:
                    posts.append(post_from_document(json.load(f)))
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.warning(
                    f"Skipping unreadable post document {path.name}: {e}",
                    extra={"backend": self.name},
                )
        return posts

    async def persist(self, post: Post) -> None:
        try:
            await asyncio.to_thread(self._write_sync, post)
        except OSError as e:
            logger.error(
                f"Post write failed: {e}",
                extra={"post_id": post.id, "backend": self.name},
            )
            raise PersistenceError(
                "Could not write post document", "persist",
                ErrorContext(post_id=post.id, backend=self.name),
            ) from e

    def _write_sync(self, post: Post) -> None:
        self.content_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.content_dir, prefix=".post-", suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(post_to_document(post), f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self._path_for(post.id))
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    async def erase(self, post: Post) -> None:
        try:
            await asyncio.to_thread(self._path_for(post.id).unlink, missing_ok=True)
        except OSError as e:
            logger.error(
                f"Post delete failed: {e}",
                extra={"post_id": post.id, "backend": self.name},
            )
            raise PersistenceError(
                "Could not delete post document", "erase",
                ErrorContext(post_id=post.id, backend=self.name),
            ) from e

    async def store_file(
        self, data: bytes, file_name: str, suffix: str | None = None,
    ) -> str:
        return await self.file_store.store(data, file_name, suffix)
