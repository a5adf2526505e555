"""Comic submission pipeline.

A submission creates (optionally) a new artist, the comic, its metadata,
series links and tags. Moderators skip review: their comics go straight to
``pending`` with an ``excellent`` verdict and earn upload points.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, insert, select

from comic_cms.core.errors import NotFoundError, ValidationError
from comic_cms.db.gateway import DataStore
from comic_cms.models import (
    Artist,
    ArtistLink,
    Comic,
    ComicKeyword,
    ComicLink,
    ComicMetadata,
    ComicNameBan,
    User,
)
from comic_cms.models.comic import (
    PUBLISH_STATUS_PENDING,
    PUBLISH_STATUS_UPLOADED,
    UPLOAD_VERDICT_EXCELLENT,
)
from comic_cms.schemas.upload import ComicUpload, NewArtist
from comic_cms.services.contribution_points import ContributionPointsLedger

logger = logging.getLogger(__name__)

ILLEGAL_COMIC_NAME_CHARS = ("#", "/", "?", "\\")
MIN_COMIC_NAME_LENGTH = 2
UNKNOWN_IP = "unknown"

_URL_PATTERN = re.compile(r"^(https?://|www\.)|/", re.IGNORECASE)


@dataclass(frozen=True)
class SubmissionResult:
    """Identifiers and outcome of a successful submission."""

    comic_id: int
    artist_id: int
    publish_status: str
    points_awarded: bool = False


def is_username_url(value: str) -> bool:
    """Return True if ``value`` looks like a URL rather than a bare username."""
    return bool(_URL_PATTERN.search(value.strip()))


def validate_upload(upload: ComicUpload) -> None:
    """Check a submission before anything is written.

    Raises:
        ValidationError: With a message suitable for the submitting user.
    """
    name = (upload.comic_name or "").strip()
    if not name:
        raise ValidationError("Comic name is required")
    if len(name) < MIN_COMIC_NAME_LENGTH:
        raise ValidationError(f"Comic name must be at least {MIN_COMIC_NAME_LENGTH} characters")
    if any(char in name for char in ILLEGAL_COMIC_NAME_CHARS):
        raise ValidationError("Comic name contains illegal characters")
    if not upload.category:
        raise ValidationError("Category is required")
    if not upload.state:
        raise ValidationError("State is required")
    if upload.artist_id is None and upload.new_artist is None:
        raise ValidationError("Artist is required")
    if upload.artist_id is not None and upload.new_artist is not None:
        raise ValidationError("Choose either an existing artist or a new artist, not both")

    if upload.new_artist is not None:
        if not upload.new_artist.artist_name.strip():
            raise ValidationError("Artist name is required")
        if upload.new_artist.e621_name and is_username_url(upload.new_artist.e621_name):
            raise ValidationError("e621 name must be a username, not a URL")
        if upload.new_artist.patreon_name and is_username_url(upload.new_artist.patreon_name):
            raise ValidationError("Patreon name must be a username, not a URL")


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ComicSubmissionPipeline:
    """Persists new comic submissions."""

    def __init__(self, store: DataStore, ledger: ContributionPointsLedger | None = None) -> None:
        self.store = store
        self.ledger = ledger or ContributionPointsLedger(store)

    def submit(
        self,
        upload: ComicUpload,
        user: User | None = None,
        user_ip: str | None = None,
    ) -> SubmissionResult:
        """Validate and store a submission.

        All rows are written in one transaction. Upload points for moderators
        are awarded afterwards and never fail the submission.

        Args:
            upload: The parsed submission body.
            user: The submitting account, or None for anonymous uploads.
            user_ip: Client address, recorded for anonymous uploads.

        Raises:
            ValidationError: If the body is invalid or the name is taken or banned.
            NotFoundError: If ``artist_id`` references a missing artist.
            DataStoreError: If any write fails; nothing is kept in that case.
        """
        validate_upload(upload)
        skip_approval = user is not None and user.is_mod
        comic_name = (upload.comic_name or "").strip()
        log_ctx: dict[str, Any] = {
            "comic_name": comic_name,
            "user_id": user.id if user else None,
        }

        with self.store.transaction("Error uploading comic", **log_ctx):
            self._ensure_name_available(comic_name)

            if upload.new_artist is not None:
                artist_id = self._create_artist(upload.new_artist, skip_approval)
            else:
                artist_id = self._ensure_artist_exists(upload.artist_id)

            publish_status = PUBLISH_STATUS_PENDING if skip_approval else PUBLISH_STATUS_UPLOADED
            comic_id = self._create_comic(upload, comic_name, artist_id, publish_status)
            self._create_metadata(comic_id, upload, skip_approval, user, user_ip)

            if upload.previous_comic or upload.next_comic:
                self._create_links(upload, comic_id)
            if upload.tag_ids:
                self._create_tags(upload.tag_ids, comic_id)

        points_awarded = False
        if skip_approval and user is not None:
            points_awarded = self.ledger.award_best_effort(
                user.id,
                f"comicUpload{UPLOAD_VERDICT_EXCELLENT}",
            )

        logger.info(
            "Comic %r uploaded as %s (comic id %d, artist id %d)",
            comic_name,
            publish_status,
            comic_id,
            artist_id,
        )
        return SubmissionResult(
            comic_id=comic_id,
            artist_id=artist_id,
            publish_status=publish_status,
            points_awarded=points_awarded,
        )

    def _ensure_name_available(self, comic_name: str) -> None:
        lowered = comic_name.lower()
        existing = self.store.execute(
            select(Comic.id).where(func.lower(Comic.name) == lowered),
            error_message="Error checking existing comic names",
            comic_name=comic_name,
        ).first()
        if existing is not None:
            raise ValidationError("A comic with this name already exists")

        banned = self.store.execute(
            select(ComicNameBan.id).where(func.lower(ComicNameBan.name) == lowered),
            error_message="Error checking banned comic names",
            comic_name=comic_name,
        ).first()
        if banned is not None:
            raise ValidationError("This comic name has been banned")

    def _ensure_artist_exists(self, artist_id: int | None) -> int:
        found = self.store.execute(
            select(Artist.id).where(Artist.id == artist_id),
            error_message="Error looking up artist",
            artist_id=artist_id,
        ).scalar_one_or_none()
        if found is None:
            raise NotFoundError("Artist not found", artist_id=artist_id)
        return found

    def _create_artist(self, new_artist: NewArtist, skip_approval: bool) -> int:
        artist_name = new_artist.artist_name.strip()
        taken = self.store.execute(
            select(Artist.id).where(func.lower(Artist.name) == artist_name.lower()),
            error_message="Error checking existing artist names",
            artist_name=artist_name,
        ).first()
        if taken is not None:
            raise ValidationError("An artist with this name already exists")

        artist_id = self.store.execute(
            insert(Artist)
            .values(
                {
                    Artist.name: artist_name,
                    Artist.e621_name: _clean_optional(new_artist.e621_name),
                    Artist.patreon_name: _clean_optional(new_artist.patreon_name),
                    Artist.is_pending: not skip_approval,
                }
            )
            .returning(Artist.id),
            error_message="Error inserting artist",
            artist_name=artist_name,
        ).scalar_one()

        links = list(dict.fromkeys(link.strip() for link in new_artist.links if link.strip()))
        if links:
            self.store.execute(
                insert(ArtistLink),
                [{"artist_id": artist_id, "link_url": link} for link in links],
                error_message="Error inserting artist links",
                artist_id=artist_id,
            )
        return artist_id

    def _create_comic(
        self,
        upload: ComicUpload,
        comic_name: str,
        artist_id: int,
        publish_status: str,
    ) -> int:
        return self.store.execute(
            insert(Comic)
            .values(
                {
                    Comic.name: comic_name,
                    Comic.classification: upload.classification,
                    Comic.category: upload.category,
                    Comic.state: upload.state,
                    Comic.number_of_pages: upload.number_of_pages,
                    Comic.artist_id: artist_id,
                    Comic.publish_status: publish_status,
                }
            )
            .returning(Comic.id),
            error_message="Error inserting comic",
            comic_name=comic_name,
        ).scalar_one()

    def _create_metadata(
        self,
        comic_id: int,
        upload: ComicUpload,
        skip_approval: bool,
        user: User | None,
        user_ip: str | None,
    ) -> None:
        # Registered uploads are identified by user id, anonymous ones by IP.
        self.store.execute(
            insert(ComicMetadata).values(
                {
                    ComicMetadata.comic_id: comic_id,
                    ComicMetadata.upload_user_id: user.id if user else None,
                    ComicMetadata.upload_user_ip: None if user else (user_ip or UNKNOWN_IP),
                    ComicMetadata.upload_id: upload.upload_id,
                    ComicMetadata.verdict: UPLOAD_VERDICT_EXCELLENT if skip_approval else None,
                }
            ),
            error_message="Error creating comic metadata",
            comic_id=comic_id,
        )

    def _create_links(self, upload: ComicUpload, comic_id: int) -> None:
        rows = []
        if upload.previous_comic:
            rows.append({"first_comic": upload.previous_comic.id, "last_comic": comic_id})
        if upload.next_comic:
            rows.append({"first_comic": comic_id, "last_comic": upload.next_comic.id})
        self.store.execute(
            insert(ComicLink),
            rows,
            error_message="Error creating comic links",
            comic_id=comic_id,
        )

    def _create_tags(self, tag_ids: list[int], comic_id: int) -> None:
        unique_tag_ids = list(dict.fromkeys(tag_ids))
        self.store.execute(
            insert(ComicKeyword),
            [{"comic_id": comic_id, "keyword_id": tag_id} for tag_id in unique_tag_ids],
            error_message="Error creating comic tags",
            comic_id=comic_id,
        )
