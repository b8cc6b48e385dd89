"""Post Entity — immutable value object for a single blog entry.

Invariants:
    - pub_date and last_modified are timezone-aware UTC (naive input read as UTC)
    - categories de-duplicated case-insensitively, first spelling wins, order kept
    - category_keys is the lower-cased view used for indexing and lookups
    - Post is frozen: every change produces a new instance (dataclasses.replace)

Design Decisions:
    - Frozen dataclass over ORM model: the cache shares instances across
      concurrent readers, so they must never be mutated in place
    - Identity assignment (id, slug) is a pure helper here, shared by every
      backend, so all storage variants generate identical values
"""

import re
import unicodedata
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from blogcore.core.domain_types import CategoryKey, PostId, Slug


_RESERVED_URL_CHARS = re.compile(r"[!#$&'()*,/:;=?@\[\]\"%.<>\\^_{}|~`+]")
_DASH_RUNS = re.compile(r"-{2,}")


def as_utc(value: datetime) -> datetime:
    """Return value as an aware UTC datetime. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_category(name: str) -> CategoryKey:
    return CategoryKey(name.strip().lower())


def dedupe_categories(names) -> tuple[str, ...]:
    """Trim, drop blanks, and de-duplicate case-insensitively (first spelling wins)."""
    seen: set[str] = set()
    result: list[str] = []
    for raw in names:
        name = raw.strip()
        key = name.lower()
        if not name or key in seen:
            continue
        seen.add(key)
        result.append(name)
    return tuple(result)


def create_slug(title: str) -> Slug:
    """Build a URL-safe slug from a title.

    Lower-cases, turns spaces into dashes, strips diacritics and reserved URL
    characters. Non-latin letters are kept as-is.
    """
    text = title.strip().lower().replace(" ", "-")
    decomposed = unicodedata.normalize("NFD", text)
    text = "".join(c for c in decomposed if unicodedata.category(c) != "Mn")
    text = unicodedata.normalize("NFC", text)
    text = _RESERVED_URL_CHARS.sub("", text)
    return Slug(_DASH_RUNS.sub("-", text).strip("-"))


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Post:
    """A blog entry. Only id, slug, pub_date, is_published and categories
    matter to the core; the rest is display payload."""

    id: PostId
    slug: Slug
    title: str
    pub_date: datetime
    is_published: bool = True
    categories: tuple[str, ...] = ()
    excerpt: str = ""
    content: str = ""
    last_modified: datetime = field(default_factory=_utc_now)

    def __post_init__(self):
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "pub_date", as_utc(self.pub_date))
        object.__setattr__(self, "last_modified", as_utc(self.last_modified))
        object.__setattr__(self, "categories", dedupe_categories(self.categories))

    @property
    def category_keys(self) -> frozenset[CategoryKey]:
        return frozenset(normalize_category(c) for c in self.categories)

    def has_category(self, category: str) -> bool:
        return normalize_category(category) in self.category_keys


def assign_identity(post: Post, now: datetime | None = None) -> Post:
    """Fill in id and slug for a new post and stamp last_modified.

    Existing id/slug values are kept. The slug falls back to the id when the
    title produces an empty slug (e.g. a title made only of punctuation).
    """
    post_id = post.id or PostId(uuid.uuid4().hex)
    slug = post.slug or create_slug(post.title) or Slug(post_id)
    return replace(
        post, id=post_id, slug=slug, last_modified=now or _utc_now(),
    )
