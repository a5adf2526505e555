"""Moderator edits of artist data."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, func, insert, select, update

from comic_cms.core.errors import NotFoundError, ValidationError
from comic_cms.db.gateway import BatchStatement, DataStore
from comic_cms.models import Artist, ArtistLink
from comic_cms.schemas.artist import ArtistDataChanges

logger = logging.getLogger(__name__)


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class ArtistEditor:
    """Applies partial artist updates."""

    def __init__(self, store: DataStore) -> None:
        self.store = store

    def get_links(self, artist_id: int) -> list[str]:
        return list(
            self.store.execute(
                select(ArtistLink.link_url)
                .where(ArtistLink.artist_id == artist_id)
                .order_by(ArtistLink.id),
                error_message="Error getting artist links",
                artist_id=artist_id,
            ).scalars()
        )

    def update_artist_data(self, changes: ArtistDataChanges) -> None:
        """Apply the fields present in ``changes``.

        Links are replaced by diffing: links missing from the new list are
        deleted, new ones inserted, unchanged ones left alone.

        Raises:
            NotFoundError: If the artist does not exist.
            ValidationError: If the new name is taken by another artist.
        """
        artist_id = changes.artist_id
        log_ctx = {"artist_id": artist_id}
        exists = self.store.execute(
            select(Artist.id).where(Artist.id == artist_id),
            error_message="Error getting artist",
            **log_ctx,
        ).first()
        if exists is None:
            raise NotFoundError("Artist not found", **log_ctx)

        provided = changes.model_fields_set
        values: dict[Any, Any] = {}
        name = (changes.name or "").strip()
        if name:
            self._ensure_name_free(artist_id, name)
            values[Artist.name] = name
        if "e621_name" in provided:
            values[Artist.e621_name] = _blank_to_none(changes.e621_name)
        if "patreon_name" in provided:
            values[Artist.patreon_name] = _blank_to_none(changes.patreon_name)

        statements: list[BatchStatement] = []
        if values:
            statements.append(
                BatchStatement(
                    update(Artist)
                    .where(Artist.id == artist_id)
                    .values(values)
                    .execution_options(synchronize_session=False),
                    error_log_message="Error updating artist details",
                )
            )

        added: list[str] = []
        removed: list[str] = []
        if changes.links is not None:
            new_links = list(dict.fromkeys(l.strip() for l in changes.links if l.strip()))
            old_links = self.get_links(artist_id)
            added = [link for link in new_links if link not in old_links]
            removed = [link for link in old_links if link not in new_links]
            if added:
                statements.append(
                    BatchStatement(
                        insert(ArtistLink),
                        [{"artist_id": artist_id, "link_url": link} for link in added],
                        error_log_message="Error inserting artist links",
                    )
                )
            if removed:
                statements.append(
                    BatchStatement(
                        delete(ArtistLink)
                        .where(ArtistLink.artist_id == artist_id, ArtistLink.link_url.in_(removed))
                        .execution_options(synchronize_session=False),
                        error_log_message="Error deleting artist links",
                    )
                )

        self.store.execute_batch(statements, error_message="Error updating artist data", **log_ctx)
        logger.info(
            "Artist %d updated: fields %s, %d links added, %d removed",
            artist_id,
            sorted(column.key for column in values),
            len(added),
            len(removed),
        )

    def _ensure_name_free(self, artist_id: int, name: str) -> None:
        taken = self.store.execute(
            select(Artist.id).where(func.lower(Artist.name) == name.lower(), Artist.id != artist_id),
            error_message="Error checking existing artist names",
            artist_id=artist_id,
        ).first()
        if taken is not None:
            raise ValidationError("An artist with this name already exists")
