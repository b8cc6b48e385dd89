"""Health & Readiness — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 until the post cache has been loaded
    - With SQL storage, /health/ready also returns 503 while the database
      does not answer; reads would still work from the cache, writes would not

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from blogcore.infrastructure.sql_backend import SqlBackend

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness check. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "blogcore-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness: cache populated and, for SQL storage, database reachable."""
    repo = getattr(request.app.state, "repository", None)
    if repo is None or not repo.loaded:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "cache_not_loaded"},
        )
    checks = {"cache": "loaded", "backend": repo.backend.name}
    if isinstance(repo.backend, SqlBackend):
        if not await repo.backend.db.health_check():
            logger.warning("Readiness failed: database unavailable")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "reason": "database_unavailable"},
            )
        checks["database"] = "ok"
    return {
        "status": "ready",
        "checks": checks,
        "posts": len(repo.cache),
    }
