"""Post Cache — process-wide in-memory snapshot of every post plus its category index.

Invariants:
    - Holds ALL posts (published, draft, scheduled); no filtering at storage time
    - Sequence is sorted by pub_date descending after every mutation
    - Sort is stable: equal pub_dates keep insertion order
    - Category index is rebuilt in the same snapshot as the sequence, so the
      two can never disagree
    - Readers never block; writers are serialized by a lock

Design Decisions:
    - Copy-on-write snapshot swap over a read-write lock: a write builds a new
      immutable _Snapshot and publishes it with one reference assignment,
      so a reader sees either the old or the new state, never a half-rebuilt one
    - threading.Lock (not asyncio.Lock): critical sections are pure in-memory,
      never await, and the cache may be touched from worker threads
    - Full re-sort on mutation: authoring is rare compared to reads
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable

from blogcore.core.domain_types import CategoryKey
from blogcore.core.post import Post, normalize_category

logger = logging.getLogger(__name__)


def sort_posts(posts: Iterable[Post]) -> tuple[Post, ...]:
    """Most recent first. Stable, so sort_posts(sort_posts(xs)) == sort_posts(xs)."""
    return tuple(sorted(posts, key=lambda p: p.pub_date, reverse=True))


def build_category_index(
    posts: tuple[Post, ...],
) -> dict[CategoryKey, tuple[Post, ...]]:
    """Map normalized category -> posts carrying it, in the order of `posts`."""
    index: dict[CategoryKey, list[Post]] = {}
    for post in posts:
        for key in post.category_keys:
            index.setdefault(key, []).append(post)
    return {key: tuple(group) for key, group in index.items()}


@dataclass(frozen=True)
class _Snapshot:
    posts: tuple[Post, ...] = ()
    by_category: dict[CategoryKey, tuple[Post, ...]] = field(default_factory=dict)

    @classmethod
    def of(cls, posts: Iterable[Post]) -> "_Snapshot":
        ordered = sort_posts(posts)
        return cls(posts=ordered, by_category=build_category_index(ordered))


class PostCache:
    """Ordered, indexed, thread-safe collection of every known post."""

    def __init__(self, posts: Iterable[Post] = ()):
        self._write_lock = threading.Lock()
        self._snapshot = _Snapshot.of(posts)

    def __len__(self) -> int:
        return len(self._snapshot.posts)

    # ─── Reads (lock-free) ───────────────────────────────────────

    def all(self) -> tuple[Post, ...]:
        return self._snapshot.posts

    def by_slug(self, slug: str) -> Post | None:
        wanted = slug.lower()
        return next(
            (p for p in self._snapshot.posts if p.slug.lower() == wanted), None,
        )

    def by_id(self, post_id: str) -> Post | None:
        wanted = post_id.lower()
        return next(
            (p for p in self._snapshot.posts if p.id.lower() == wanted), None,
        )

    def by_category(self, category: str) -> tuple[Post, ...]:
        return self._snapshot.by_category.get(normalize_category(category), ())

    def categories(self) -> frozenset[CategoryKey]:
        return frozenset(self._snapshot.by_category)

    def grouped_by_category(
        self, category: str | None = None,
    ) -> dict[CategoryKey, tuple[Post, ...]]:
        """The precomputed index, optionally restricted to a single key."""
        index = self._snapshot.by_category
        if category is None:
            return dict(index)
        key = normalize_category(category)
        return {key: index[key]} if key in index else {}

    # ─── Writes (serialized, copy-on-write) ──────────────────────

    def load(self, posts: Iterable[Post]) -> None:
        """Replace the whole contents. Used once at startup."""
        with self._write_lock:
            self._snapshot = _Snapshot.of(posts)
            logger.info(
                "Post cache loaded", extra={"count": len(self._snapshot.posts)},
            )

    def upsert(self, post: Post) -> None:
        """Replace the post with the same id (case-insensitive) or append it."""
        with self._write_lock:
            wanted = post.id.lower()
            current = list(self._snapshot.posts)
            for i, existing in enumerate(current):
                if existing.id.lower() == wanted:
                    current[i] = post
                    break
            else:
                current.append(post)
            self._snapshot = _Snapshot.of(current)
        logger.debug("Post cached", extra={"post_id": post.id, "slug": post.slug})

    def remove(self, post_id: str) -> bool:
        """Drop the post with this id. Returns False (no-op) when absent."""
        with self._write_lock:
            wanted = post_id.lower()
            remaining = [p for p in self._snapshot.posts if p.id.lower() != wanted]
            if len(remaining) == len(self._snapshot.posts):
                return False
            # remaining is still sorted; only the index needs rebuilding
            ordered = tuple(remaining)
            self._snapshot = _Snapshot(
                posts=ordered, by_category=build_category_index(ordered),
            )
        logger.debug("Post evicted", extra={"post_id": post_id})
        return True
