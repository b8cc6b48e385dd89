"""Service test fixtures — in-memory fake backend for PostRepository.

Invariants:
    - FakeBackend records every call in order
    - fail_next makes the next write raise PersistenceError, so persist-then-mirror
      ordering can be asserted

Design Decisions:
    - Plain class over MagicMock: satisfies the PostBackend protocol structurally
      and keeps assertions readable
"""

import pytest

from blogcore.core.errors import PersistenceError
from blogcore.services.post_repository import PostRepository


class FakeBackend:
    name = "fake"

    def __init__(self, posts=None):
        self.stored = {p.id: p for p in (posts or [])}
        self.files: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_next = False

    def _maybe_fail(self, operation: str):
        if self.fail_next:
            self.fail_next = False
            raise PersistenceError("simulated outage", operation)

    async def load_all(self):
        self.calls.append(("load_all", ""))
        return list(self.stored.values())

    async def persist(self, post):
        self.calls.append(("persist", post.id))
        self._maybe_fail("persist")
        self.stored[post.id] = post

    async def erase(self, post):
        self.calls.append(("erase", post.id))
        self._maybe_fail("erase")
        self.stored.pop(post.id, None)

    async def store_file(self, data, file_name, suffix=None):
        self.calls.append(("store_file", file_name))
        self._maybe_fail("store_file")
        name = f"{suffix or ''}{file_name}"
        self.files[name] = data
        return f"/files/{name}"


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def repo(backend):
    return PostRepository(backend)
