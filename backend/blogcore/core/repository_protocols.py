"""Boundary Protocols — contracts between core and storage backends.

Invariants:
    - Core NEVER imports from infrastructure — dependency arrows point inward only
    - Every persistence operation is reached through PostBackend
    - Implementations raise PersistenceError (core/errors.py) when they cannot commit

Design Decisions:
    - Protocol over ABC: backends are injected strategies, not subclasses of a
      shared base, so the repository has exactly one implementation
    - Async in Protocol: backends do IO; the cache logic that consumes their
      results stays synchronous
"""

from typing import Protocol

from blogcore.core.post import Post


class PostBackend(Protocol):
    """Capability set every storage variant provides."""

    name: str

    async def load_all(self) -> list[Post]: ...
    async def persist(self, post: Post) -> None: ...
    async def erase(self, post: Post) -> None: ...
    async def store_file(
        self, data: bytes, file_name: str, suffix: str | None = None,
    ) -> str: ...
