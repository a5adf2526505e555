"""Moderator endpoints for artist data."""

from __future__ import annotations

from fastapi import APIRouter

from comic_cms.api.v1.dependencies import ModUserDep, StoreDep
from comic_cms.schemas.artist import ArtistDataChanges
from comic_cms.schemas.common import SuccessResponse
from comic_cms.services.artists import ArtistEditor

router = APIRouter(prefix="/admin", tags=["artists"])


@router.post("/update-artist-data", response_model=SuccessResponse)
async def update_artist_data(
    changes: ArtistDataChanges,
    store: StoreDep,
    mod: ModUserDep,
) -> SuccessResponse:
    """Apply a partial update to an artist and replace its links if given."""
    ArtistEditor(store).update_artist_data(changes)
    return SuccessResponse()
