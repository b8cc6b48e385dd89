"""Visibility Policy — decides whether a caller may see a post.

Invariants:
    - Anonymous: visible iff pub_date <= now AND is_published
    - Administrator: visible iff pub_date <= now (drafts previewable, future posts hidden)
    - Boundary inclusive: pub_date == now is visible
    - Pure: evaluated per call, never memoized (now advances, admin is per-request)
"""

from datetime import datetime

from blogcore.core.domain_types import PublicationState
from blogcore.core.post import Post


def is_visible(post: Post, caller_is_admin: bool, now: datetime) -> bool:
    return post.pub_date <= now and (post.is_published or caller_is_admin)


def classify(post: Post, now: datetime) -> PublicationState:
    """Derive the implicit publication state. Scheduled wins over draft."""
    if post.pub_date > now:
        return PublicationState.SCHEDULED
    if not post.is_published:
        return PublicationState.DRAFT
    return PublicationState.PUBLISHED
