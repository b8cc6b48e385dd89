"""Request Dependencies — repository lookup and caller identity.

Invariants:
    - The repository is process-wide, stored on app.state by the lifespan
    - Caller identity resolved ONCE per request and passed explicitly as is_admin
    - Empty admin_token means nobody is an administrator

Design Decisions:
    - Static bearer token: authentication proper lives outside this service;
      this is the seam where a real identity provider would plug in
    - secrets.compare_digest: constant-time token comparison
"""

import secrets

from fastapi import Depends, Header, Request

from blogcore.config import Settings, get_settings
from blogcore.core.errors import NotAuthorizedError
from blogcore.services.post_repository import PostRepository


def get_repository(request: Request) -> PostRepository:
    return request.app.state.repository


def caller_is_admin(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> bool:
    if not settings.admin_token or not authorization:
        return False
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return False
    return secrets.compare_digest(token.strip(), settings.admin_token)


def require_admin(is_admin: bool = Depends(caller_is_admin)) -> None:
    if not is_admin:
        raise NotAuthorizedError()
