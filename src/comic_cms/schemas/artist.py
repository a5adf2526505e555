"""Artist editing schemas."""

from .common import CamelModel


class ArtistDataChanges(CamelModel):
    """Partial artist update.

    Only fields present in the request body are applied. ``links``, when
    given, is the artist's complete new link list.
    """

    artist_id: int
    name: str | None = None
    e621_name: str | None = None
    patreon_name: str | None = None
    links: list[str] | None = None
