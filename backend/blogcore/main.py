"""Blog API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map BlogError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Backend built and post cache loaded on startup via lifespan, before any request

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Repository kept on app.state: one process-wide cache shared by all requests
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from blogcore.api.error_handlers import register_error_handlers
from blogcore.api.routes import categories, files, health, posts
from blogcore.config import get_settings
from blogcore.infrastructure.backend_factory import build_backend
from blogcore.infrastructure.observability import setup_logging
from blogcore.infrastructure.sql_backend import SqlBackend
from blogcore.services.post_repository import PostRepository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    backend = build_backend(settings)
    repository = PostRepository(backend)
    await repository.initialize()
    app.state.repository = repository
    logger.info("Blog API started", extra={"backend": backend.name})
    yield
    if isinstance(backend, SqlBackend):
        await backend.db.dispose()
    logger.info("Blog API shutting down")


app = FastAPI(title="Blog API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(posts.router)
app.include_router(categories.router)
app.include_router(files.router)

register_error_handlers(app)

# Attachments — mounted AFTER API routes so /api/v1/* takes precedence
app.mount(
    settings.files_url_prefix,
    StaticFiles(directory=settings.files_dir, check_dir=False),
    name="files",
)
