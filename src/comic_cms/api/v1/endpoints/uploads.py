"""Comic submission endpoint."""

from __future__ import annotations

from fastapi import APIRouter, status

from comic_cms.api.v1.dependencies import ClientIpDep, OptionalUserDep, StoreDep
from comic_cms.schemas.upload import ComicUpload, UploadResponse
from comic_cms.services.comic_upload import ComicSubmissionPipeline

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_comic(
    upload: ComicUpload,
    store: StoreDep,
    user: OptionalUserDep,
    client_ip: ClientIpDep,
) -> UploadResponse:
    """Submit a comic. Anonymous submissions are recorded by client IP."""
    result = ComicSubmissionPipeline(store).submit(upload, user=user, user_ip=client_ip)
    return UploadResponse(
        comic_id=result.comic_id,
        artist_id=result.artist_id,
        publish_status=result.publish_status,
    )
