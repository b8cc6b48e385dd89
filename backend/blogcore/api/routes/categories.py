"""Category Routes — category listing, per-category posts, and grouping.

Invariants:
    - All three views apply the caller's visibility (grouping included)
    - Unknown categories answer an empty list, not 404
"""

from fastapi import APIRouter, Depends, Query

from blogcore.api.dependencies import caller_is_admin, get_repository
from blogcore.schemas.post import PostResponse
from blogcore.services.post_repository import PostRepository

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=list[str])
async def list_categories(
    repo: PostRepository = Depends(get_repository),
    is_admin: bool = Depends(caller_is_admin),
):
    return repo.list_categories(is_admin=is_admin)


# Declared before /{category} so "grouped" is not taken as a category name
@router.get("/grouped", response_model=dict[str, list[PostResponse]])
async def grouped_by_category(
    category: str | None = Query(None),
    repo: PostRepository = Depends(get_repository),
    is_admin: bool = Depends(caller_is_admin),
):
    grouped = repo.grouped_by_category(category, is_admin=is_admin)
    return {
        key: [PostResponse.from_post(p) for p in posts]
        for key, posts in grouped.items()
    }


@router.get("/{category}", response_model=list[PostResponse])
async def list_posts_in_category(
    category: str,
    repo: PostRepository = Depends(get_repository),
    is_admin: bool = Depends(caller_is_admin),
):
    posts = repo.list_by_category(category, is_admin=is_admin)
    return [PostResponse.from_post(p) for p in posts]
