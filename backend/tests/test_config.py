"""Settings tests — environment-driven configuration."""

from blogcore.config import Settings
from blogcore.core.domain_types import StorageBackend


def test_defaults_use_flat_file_storage():
    settings = Settings(_env_file=None, storage_backend="file")
    assert settings.storage_backend == StorageBackend.FILE
    assert settings.posts_per_page == 4


def test_postgres_url_rewritten_for_asyncpg():
    settings = Settings(_env_file=None, database_url="postgresql://u:p@db/blog")
    assert settings.database_url == "postgresql+asyncpg://u:p@db/blog"


def test_sqlite_url_left_alone():
    settings = Settings(_env_file=None, database_url="sqlite+aiosqlite:///x.db")
    assert settings.database_url == "sqlite+aiosqlite:///x.db"
