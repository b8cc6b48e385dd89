"""File Routes — attachment upload for post authors.

Invariants:
    - Admin only
    - Returns the stable URL the backend assigned; never overwrites a file
"""

from fastapi import APIRouter, Depends, status

from blogcore.api.dependencies import get_repository, require_admin
from blogcore.schemas.post import FileUpload, FileUploadResponse
from blogcore.services.post_repository import PostRepository

router = APIRouter(prefix="/api/v1/files", tags=["files"])


@router.post(
    "", response_model=FileUploadResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def upload_file(
    body: FileUpload, repo: PostRepository = Depends(get_repository),
):
    url = await repo.save_file(body.data, body.file_name, body.suffix)
    return FileUploadResponse(url=url)
