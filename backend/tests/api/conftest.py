"""API test fixtures — FastAPI test client over a flat-file repository.

Invariants:
    - Every test gets a fresh repository rooted in tmp_path
    - app.state.repository set directly: httpx ASGITransport does not run lifespan
    - Admin requests carry the token configured in tests/conftest.py
"""

import pytest
from httpx import ASGITransport, AsyncClient

from blogcore.infrastructure.file_backend import FileBackend
from blogcore.infrastructure.file_store import FileStore
from blogcore.main import app
from blogcore.services.post_repository import PostRepository


@pytest.fixture
async def repository(tmp_path):
    backend = FileBackend(tmp_path / "posts", FileStore(tmp_path / "files"))
    repo = PostRepository(backend)
    await repo.initialize()
    return repo


@pytest.fixture
async def client(repository):
    original = getattr(app.state, "repository", None)
    app.state.repository = repository
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.state.repository = original
