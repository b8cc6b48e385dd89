"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - PostId and Slug wrap str — compared case-insensitively everywhere
    - CategoryKey is always lower-case (normalized form used for indexing)
    - Publication state is DERIVED from (pub_date, is_published), never stored

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

PostId = NewType("PostId", str)
Slug = NewType("Slug", str)
CategoryKey = NewType("CategoryKey", str)


# ─── Enums ───────────────────────────────────────────────────────

class PublicationState(str, Enum):
    """Implicit post classification — see core/visibility.classify."""
    PUBLISHED = "published"
    SCHEDULED = "scheduled"
    DRAFT = "draft"


class StorageBackend(str, Enum):
    """Persistence backends selectable from settings."""
    FILE = "file"
    SQL = "sql"
