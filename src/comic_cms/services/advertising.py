"""Advertisement editing.

Advertisers may edit the content of their own ads. Only moderators may
change an ad's status; activating stamps ``lastActivationDate`` and ending
folds the days since then into ``numDaysActive``.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select, update

from comic_cms.core.errors import AuthorizationError, NotFoundError, ValidationError
from comic_cms.core.settings import settings
from comic_cms.db.gateway import DataStore
from comic_cms.db.time import utcnow
from comic_cms.models import Advertisement
from comic_cms.models.advertisement import AD_STATUS_ACTIVE, AD_STATUS_ENDED, AD_TYPE_CARD
from comic_cms.schemas.advertisement import EditAdRequest

logger = logging.getLogger(__name__)


def validate_ad_data(data: EditAdRequest) -> None:
    """Check an ad edit body.

    Raises:
        ValidationError: With the message shown to the advertiser.
    """
    if not (data.id and data.ad_type and data.ad_name and data.link):
        raise ValidationError("Missing fields")
    if data.ad_type == AD_TYPE_CARD:
        if not data.main_text:
            raise ValidationError("Missing main text")
        if len(data.main_text) > settings.card_ad_main_text_max_length:
            raise ValidationError("Main text too long")
        if (
            data.secondary_text
            and len(data.secondary_text) > settings.card_ad_secondary_text_max_length
        ):
            raise ValidationError("Secondary text too long")


def active_days(last_activation: datetime | None, now: datetime) -> int:
    """Days an ad has been running since ``last_activation``, counting both ends."""
    if last_activation is None:
        return 0
    # SQLite hands back naive datetimes.
    if last_activation.tzinfo is None:
        last_activation = last_activation.replace(tzinfo=UTC)
    return (now - last_activation).days + 1


class AdEditor:
    """Applies advertisement edits."""

    def __init__(self, store: DataStore, now: Callable[[], datetime] = utcnow) -> None:
        self.store = store
        self._now = now

    def edit_ad(
        self,
        data: EditAdRequest,
        user_id: int,
        is_mod: bool,
        status: str | None = None,
    ) -> None:
        """Update an ad's content and, for moderators, its status.

        Raises:
            ValidationError: If the body is invalid.
            AuthorizationError: If a non-moderator edits someone else's ad or
                tries to change a status.
            NotFoundError: If the ad does not exist.
        """
        validate_ad_data(data)
        log_ctx = {"ad_id": data.id, "user_id": user_id, "status": status}

        ad = self.store.execute(
            select(
                Advertisement.user_id,
                Advertisement.last_activation_date,
            ).where(Advertisement.id == data.id),
            error_message="Error getting ad",
            **log_ctx,
        ).first()

        if not is_mod:
            if ad is None or ad.user_id != user_id:
                raise AuthorizationError("Not authorized to edit ad", **log_ctx)
            if status:
                raise AuthorizationError("Not authorized to change status", **log_ctx)
        if ad is None:
            raise NotFoundError("Ad not found", **log_ctx)

        values: dict[Any, Any] = {
            Advertisement.ad_name: data.ad_name,
            Advertisement.link: data.link,
            Advertisement.main_text: data.main_text,
            Advertisement.secondary_text: data.secondary_text,
            Advertisement.advertiser_notes: data.notes_comments,
        }
        if status:
            values[Advertisement.status] = status
        if status == AD_STATUS_ACTIVE:
            values[Advertisement.last_activation_date] = self._now()
        elif status == AD_STATUS_ENDED:
            days = active_days(ad.last_activation_date, self._now())
            values[Advertisement.num_days_active] = Advertisement.num_days_active + days
            values[Advertisement.last_activation_date] = None

        with self.store.transaction("Error updating ad", **log_ctx):
            self.store.execute(
                update(Advertisement)
                .where(Advertisement.id == data.id)
                .values(values)
                .execution_options(synchronize_session=False),
                error_message="Error updating ad",
                **log_ctx,
            )
        logger.info("Ad %s edited by user %d", data.id, user_id)
