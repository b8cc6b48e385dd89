"""FileStore tests — naming, collision handling, and error mapping.

Tests cover:
    - Name sanitisation (path stripping, unsafe characters)
    - Explicit and default suffixes
    - Collisions never overwrite existing files
    - OSError surfaces as PersistenceError
"""

import pytest

from blogcore.core.errors import InvalidArgumentError, PersistenceError
from blogcore.infrastructure.file_store import FileStore, sanitize_file_name


def test_sanitize_strips_directories():
    assert sanitize_file_name("../../etc/passwd") == ("passwd", "")
    assert sanitize_file_name("C:\\Users\\me\\photo.JPG") == ("photo", ".jpg")


def test_sanitize_replaces_unsafe_characters():
    assert sanitize_file_name("my holiday pic!.png") == ("my-holiday-pic", ".png")


def test_sanitize_rejects_empty_names():
    with pytest.raises(InvalidArgumentError):
        sanitize_file_name("???")


async def test_store_with_explicit_suffix(tmp_path):
    store = FileStore(tmp_path, "/files")
    url = await store.store(b"data", "cat.png", "-v1")
    assert url == "/files/cat-v1.png"
    assert (tmp_path / "cat-v1.png").read_bytes() == b"data"


async def test_store_default_suffix_is_timestamp(tmp_path):
    store = FileStore(tmp_path)
    url = await store.store(b"data", "cat.png")
    name = url.rsplit("/", 1)[1]
    assert name.startswith("cat") and name.endswith(".png")
    assert name[3:-4].isdigit()


async def test_store_never_overwrites(tmp_path):
    store = FileStore(tmp_path, "/files/")
    first = await store.store(b"one", "doc.txt", "")
    second = await store.store(b"two", "doc.txt", "")
    assert first == "/files/doc.txt"
    assert second == "/files/doc-1.txt"
    assert (tmp_path / "doc.txt").read_bytes() == b"one"
    assert (tmp_path / "doc-1.txt").read_bytes() == b"two"


async def test_store_maps_os_errors(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    store = FileStore(blocker / "files")
    with pytest.raises(PersistenceError):
        await store.store(b"data", "cat.png", "")
