"""Backend Factory — builds the PostBackend selected in settings.

Invariants:
    - Exactly one backend per process
    - The SQL backend owns its DatabaseSessionManager (disposed on shutdown)
"""

import logging

from blogcore.config import Settings
from blogcore.core.domain_types import StorageBackend
from blogcore.core.repository_protocols import PostBackend
from blogcore.infrastructure.database import DatabaseSessionManager
from blogcore.infrastructure.file_backend import FileBackend
from blogcore.infrastructure.file_store import FileStore
from blogcore.infrastructure.sql_backend import SqlBackend

logger = logging.getLogger(__name__)


def build_backend(settings: Settings) -> PostBackend:
    file_store = FileStore(settings.files_dir, settings.files_url_prefix)
    if settings.storage_backend == StorageBackend.SQL:
        db = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        logger.info("Using SQL post storage", extra={"backend": "sql"})
        return SqlBackend(db, file_store)
    logger.info("Using flat-file post storage", extra={"backend": "file"})
    return FileBackend(settings.content_dir, file_store)
