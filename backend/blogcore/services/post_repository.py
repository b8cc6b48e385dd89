"""Post Repository — single entry point for reading and writing posts.

Invariants:
    - Every read applies the visibility policy for the caller passed in
      (is_admin is explicit, never read from ambient request state)
    - Reads are total: absence is None / empty, never an exception
    - "Not visible" is indistinguishable from "does not exist"
    - Writes persist FIRST, then mirror into the cache; a PersistenceError
      leaves the cache untouched
    - Writes are serialized so cache mutation order matches persist order
    - Ids match case-insensitively, but the backend always receives the id
      spelling already cached, so one post never becomes two records

Design Decisions:
    - One repository parameterized by an injected PostBackend instead of a
      class per storage variant
    - grouped_by_category applies visibility like every other read path and
      drops categories left empty, so drafts cannot leak through grouping
    - list_categories applies the full policy (date check included), not just
      the published flag
"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone

from blogcore.core.domain_types import CategoryKey
from blogcore.core.errors import (
    ErrorContext, InvalidArgumentError, PersistenceError, SlugConflictError,
)
from blogcore.core.post import Post, as_utc, assign_identity
from blogcore.core.post_cache import PostCache
from blogcore.core.repository_protocols import PostBackend
from blogcore.core.visibility import is_visible

logger = logging.getLogger(__name__)


def _resolve_now(now: datetime | None) -> datetime:
    return as_utc(now) if now is not None else datetime.now(timezone.utc)


def _require_non_negative(value: int, argument: str) -> None:
    if value < 0:
        raise InvalidArgumentError(
            f"{argument} must be non-negative, got {value}", argument,
        )


class PostRepository:
    """Composes PostCache + visibility policy on top of a storage backend."""

    def __init__(self, backend: PostBackend, cache: PostCache | None = None):
        self.backend = backend
        self.cache = cache if cache is not None else PostCache()
        self._write_lock = asyncio.Lock()
        self.loaded = False

    async def initialize(self) -> None:
        """Populate the cache from the backend. Called once at startup."""
        posts = await self.backend.load_all()
        self.cache.load(posts)
        self.loaded = True
        logger.info(
            f"Loaded {len(posts)} post(s)",
            extra={"backend": self.backend.name, "count": len(posts)},
        )

    # ─── Reads ───────────────────────────────────────────────────

    def list_posts(
        self, count: int, skip: int = 0, *,
        is_admin: bool, now: datetime | None = None,
    ) -> list[Post]:
        _require_non_negative(count, "count")
        _require_non_negative(skip, "skip")
        at = _resolve_now(now)
        visible = [p for p in self.cache.all() if is_visible(p, is_admin, at)]
        return visible[skip:skip + count]

    def list_by_category(
        self, category: str, *, is_admin: bool, now: datetime | None = None,
    ) -> list[Post]:
        at = _resolve_now(now)
        return [
            p for p in self.cache.by_category(category)
            if is_visible(p, is_admin, at)
        ]

    def grouped_by_category(
        self, category: str | None = None, *,
        is_admin: bool, now: datetime | None = None,
    ) -> dict[CategoryKey, list[Post]]:
        at = _resolve_now(now)
        grouped: dict[CategoryKey, list[Post]] = {}
        for key, posts in self.cache.grouped_by_category(category).items():
            visible = [p for p in posts if is_visible(p, is_admin, at)]
            if visible:
                grouped[key] = visible
        return grouped

    def get_by_slug(
        self, slug: str, *, is_admin: bool, now: datetime | None = None,
    ) -> Post | None:
        post = self.cache.by_slug(slug)
        if post is not None and is_visible(post, is_admin, _resolve_now(now)):
            return post
        return None

    def get_by_id(
        self, post_id: str, *, is_admin: bool, now: datetime | None = None,
    ) -> Post | None:
        post = self.cache.by_id(post_id)
        if post is not None and is_visible(post, is_admin, _resolve_now(now)):
            return post
        return None

    def list_categories(
        self, *, is_admin: bool, now: datetime | None = None,
    ) -> list[CategoryKey]:
        at = _resolve_now(now)
        keys: set[CategoryKey] = set()
        for post in self.cache.all():
            if is_visible(post, is_admin, at):
                keys.update(post.category_keys)
        return sorted(keys)

    def get_for_update(self, post_id: str) -> Post | None:
        """Write-path lookup: ignores visibility so scheduled posts stay editable.

        Callers must have established admin rights.
        """
        return self.cache.by_id(post_id)

    # ─── Writes ──────────────────────────────────────────────────

    async def save(self, post: Post) -> Post:
        """Persist a post (insert or replace by id) and mirror it in the cache."""
        async with self._write_lock:
            stored = assign_identity(post)
            existing = self.cache.by_id(stored.id)
            if existing is not None:
                # backends key by the exact id string; reuse the stored spelling
                stored = replace(stored, id=existing.id)
            owner = self.cache.by_slug(stored.slug)
            if owner is not None and owner.id.lower() != stored.id.lower():
                raise SlugConflictError(
                    stored.slug, ErrorContext(post_id=stored.id),
                )
            try:
                await self.backend.persist(stored)
            except PersistenceError as e:
                logger.error(
                    f"Save failed, cache left unchanged: {e.message}",
                    extra={"post_id": stored.id, "error_code": e.code},
                )
                raise
            self.cache.upsert(stored)
        logger.info("Post saved", extra={"post_id": stored.id, "slug": stored.slug})
        return stored

    async def delete(self, post: Post) -> None:
        async with self._write_lock:
            post = self.cache.by_id(post.id) or post
            try:
                await self.backend.erase(post)
            except PersistenceError as e:
                logger.error(
                    f"Delete failed, cache left unchanged: {e.message}",
                    extra={"post_id": post.id, "error_code": e.code},
                )
                raise
            self.cache.remove(post.id)
        logger.info("Post deleted", extra={"post_id": post.id})

    async def save_file(
        self, data: bytes, file_name: str, suffix: str | None = None,
    ) -> str:
        """Store an attachment; the backend owns naming and collisions."""
        return await self.backend.store_file(data, file_name, suffix)
