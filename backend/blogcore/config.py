"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Secrets (admin_token) come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - storage_backend picks exactly one backend for the process lifetime

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults for every non-secret setting: flat-file storage works out of the box
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blogcore.core.domain_types import StorageBackend


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    storage_backend: StorageBackend = StorageBackend.FILE
    content_dir: str = "data/posts"
    files_dir: str = "data/files"
    files_url_prefix: str = "/files"

    # Database (storage_backend == "sql")
    database_url: str = "sqlite+aiosqlite:///blog.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Access
    admin_token: str = ""

    # Presentation
    posts_per_page: int = 4

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
