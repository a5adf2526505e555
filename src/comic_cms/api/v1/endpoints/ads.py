"""Advertisement endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from comic_cms.api.v1.dependencies import CurrentUserDep, StoreDep
from comic_cms.schemas.advertisement import EditAdRequest
from comic_cms.schemas.common import SuccessResponse
from comic_cms.services.advertising import AdEditor

router = APIRouter(prefix="/ads", tags=["ads"])


@router.post("/edit", response_model=SuccessResponse)
async def edit_ad(
    body: EditAdRequest,
    store: StoreDep,
    current_user: CurrentUserDep,
) -> SuccessResponse:
    """Edit an ad. Advertisers edit their own ads; moderators may also set the status."""
    AdEditor(store).edit_ad(body, current_user.id, current_user.is_mod, body.status)
    return SuccessResponse()
