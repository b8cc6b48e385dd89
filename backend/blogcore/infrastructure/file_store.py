"""Attachment Store — writes uploaded files to disk and returns a stable URL.

Invariants:
    - Stored name is <stem><suffix><ext>; suffix defaults to a UTC timestamp
    - Never overwrites: on collision a counter is appended (open mode "xb")
    - Only the base name of the caller's file name is used (no path traversal)
    - OSError mapped to PersistenceError; bad names to InvalidArgumentError

Design Decisions:
    - Shared by every backend: attachments live on disk even when posts live in SQL,
      so one StaticFiles mount serves them all
    - Blocking file IO runs in asyncio.to_thread
"""

import asyncio
import logging
import re
from datetime import datetime, timezone
from pathlib import Path, PurePath

from blogcore.core.errors import (
    ErrorContext, InvalidArgumentError, PersistenceError,
)

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
MAX_COLLISION_ATTEMPTS = 1000


def sanitize_file_name(file_name: str) -> tuple[str, str]:
    """Split a caller-supplied name into a safe (stem, extension) pair."""
    base = PurePath(file_name.replace("\\", "/")).name
    path = PurePath(base)
    stem = _UNSAFE_CHARS.sub("-", path.stem).strip("-.")
    ext = _UNSAFE_CHARS.sub("", path.suffix.lower())
    if not stem:
        raise InvalidArgumentError(
            f"File name '{file_name}' has no usable characters", "file_name",
        )
    return stem, ext


def default_suffix() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")


class FileStore:
    """Attachment storage rooted at a directory, published under a URL prefix."""

    def __init__(self, root: str | Path, url_prefix: str = "/files"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    async def store(
        self, data: bytes, file_name: str, suffix: str | None = None,
    ) -> str:
        stem, ext = sanitize_file_name(file_name)
        if suffix is None:
            suffix = default_suffix()
        suffix = _UNSAFE_CHARS.sub("", suffix)
        try:
            name = await asyncio.to_thread(self._write_new, f"{stem}{suffix}", ext, data)
        except OSError as e:
            logger.error(f"Attachment write failed: {e}")
            raise PersistenceError(
                "Could not write attachment", "store_file",
                ErrorContext(debug_info={"file_name": file_name}),
            ) from e
        logger.info(f"Stored attachment {name}")
        return f"{self.url_prefix}/{name}"

    def _write_new(self, stem: str, ext: str, data: bytes) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        for attempt in range(MAX_COLLISION_ATTEMPTS):
            name = f"{stem}{ext}" if attempt == 0 else f"{stem}-{attempt}{ext}"
            try:
                with open(self.root / name, "xb") as f:
                    f.write(data)
                return name
            except FileExistsError:
                continue
        raise FileExistsError(f"No free name for {stem}{ext}")
