"""Comic submission schemas.

Fields are permissive; the submission pipeline validates them and reports
the specific problem to the client.
"""

from pydantic import Field

from .common import CamelModel, SuccessResponse


class ComicTiny(CamelModel):
    """Reference to an existing comic."""

    id: int
    name: str | None = None


class NewArtist(CamelModel):
    """Artist created together with a submitted comic."""

    artist_name: str = ""
    e621_name: str | None = None
    patreon_name: str | None = None
    links: list[str] = Field(default_factory=list)


class ComicUpload(CamelModel):
    """Body of a comic submission."""

    upload_id: str | None = None
    comic_name: str | None = None
    classification: str | None = None
    category: str | None = None
    state: str | None = None
    artist_id: int | None = None
    new_artist: NewArtist | None = None
    previous_comic: ComicTiny | None = None
    next_comic: ComicTiny | None = None
    tag_ids: list[int] = Field(default_factory=list)
    number_of_pages: int = 0


class UploadResponse(SuccessResponse):
    """Identifiers created by a submission."""

    comic_id: int
    artist_id: int
    publish_status: str
