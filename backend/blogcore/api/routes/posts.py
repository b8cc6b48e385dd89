"""Post Routes — listing, lookup, and admin authoring of posts.

Invariants:
    - Every read passes the caller's admin flag to the repository
    - Invisible posts answer 404 exactly like missing ones
    - Writes require an administrator (require_admin)
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, Response, status

from blogcore.api.dependencies import caller_is_admin, get_repository, require_admin
from blogcore.config import Settings, get_settings
from blogcore.core.domain_types import PostId, Slug
from blogcore.core.errors import ResourceNotFoundError
from blogcore.core.post import Post
from blogcore.schemas.post import PostPage, PostResponse, PostWrite
from blogcore.services.post_repository import PostRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


@router.get("", response_model=PostPage)
async def list_posts(
    page: int = Query(0, ge=0),
    repo: PostRepository = Depends(get_repository),
    is_admin: bool = Depends(caller_is_admin),
    settings: Settings = Depends(get_settings),
):
    """One page of visible posts, most recent first."""
    size = settings.posts_per_page
    now = datetime.now(timezone.utc)
    posts = repo.list_posts(size, page * size, is_admin=is_admin, now=now)
    more = repo.list_posts(1, (page + 1) * size, is_admin=is_admin, now=now)
    return PostPage(
        page=page,
        page_size=size,
        posts=[PostResponse.from_post(p) for p in posts],
        has_more=bool(more),
    )


@router.get("/by-slug/{slug}", response_model=PostResponse)
async def get_post_by_slug(
    slug: str,
    repo: PostRepository = Depends(get_repository),
    is_admin: bool = Depends(caller_is_admin),
):
    post = repo.get_by_slug(slug, is_admin=is_admin)
    if post is None:
        raise ResourceNotFoundError("Post", slug)
    return PostResponse.from_post(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    repo: PostRepository = Depends(get_repository),
    is_admin: bool = Depends(caller_is_admin),
):
    post = repo.get_by_id(post_id, is_admin=is_admin)
    if post is None:
        raise ResourceNotFoundError("Post", post_id)
    return PostResponse.from_post(post)


@router.post(
    "", response_model=PostResponse, status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_post(
    body: PostWrite, repo: PostRepository = Depends(get_repository),
):
    post = Post(
        id=PostId(""),
        slug=Slug(body.slug or ""),
        title=body.title,
        excerpt=body.excerpt,
        content=body.content,
        pub_date=body.pub_date or datetime.now(timezone.utc),
        is_published=body.is_published,
        categories=tuple(body.categories),
    )
    stored = await repo.save(post)
    return PostResponse.from_post(stored)


@router.put(
    "/{post_id}", response_model=PostResponse,
    dependencies=[Depends(require_admin)],
)
async def update_post(
    post_id: str,
    body: PostWrite,
    repo: PostRepository = Depends(get_repository),
):
    existing = repo.get_for_update(post_id)
    if existing is None:
        raise ResourceNotFoundError("Post", post_id)
    updated = replace(
        existing,
        slug=Slug(body.slug or existing.slug),
        title=body.title,
        excerpt=body.excerpt,
        content=body.content,
        pub_date=body.pub_date or existing.pub_date,
        is_published=body.is_published,
        categories=tuple(body.categories),
    )
    stored = await repo.save(updated)
    return PostResponse.from_post(stored)


@router.delete(
    "/{post_id}", status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_post(
    post_id: str, repo: PostRepository = Depends(get_repository),
):
    existing = repo.get_for_update(post_id)
    if existing is None:
        raise ResourceNotFoundError("Post", post_id)
    await repo.delete(existing)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
