"""Publishing queue for scheduled comics without a fixed publish date.

Queue entries are comics with ``publishStatus = 'scheduled'`` and no
``publishDate``. Their ``publishingQueuePos`` values drift as comics enter
and leave the queue; ``recalculate`` restores the dense ``1..N`` numbering.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy import select, update

from comic_cms.core.errors import InvalidStateError, NotFoundError, ValidationError
from comic_cms.db.gateway import BatchStatement, DataStore
from comic_cms.models import Comic, ComicMetadata
from comic_cms.models.comic import (
    PUBLISH_STATUS_PENDING,
    PUBLISH_STATUS_PUBLISHED,
    PUBLISH_STATUS_SCHEDULED,
    PUBLISH_STATUS_UNLISTED,
)

logger = logging.getLogger(__name__)

QUEUE_DIRECTIONS = (-1, 1)
_SCHEDULABLE_STATUSES = (PUBLISH_STATUS_PENDING, PUBLISH_STATUS_SCHEDULED)


@dataclass(frozen=True)
class QueueEntry:
    """A comic waiting in the publishing queue."""

    comic_id: int
    name: str
    position: int | None


class PublishingQueueManager:
    """Orders, schedules and unschedules comics."""

    def __init__(self, store: DataStore) -> None:
        self.store = store

    def get_queue(self) -> list[QueueEntry]:
        """Return queue entries ordered by position.

        Entries without a position come last; ties are broken by comic id.
        """
        rows = self.store.execute(
            select(Comic.id, Comic.name, ComicMetadata.publishing_queue_pos)
            .join(ComicMetadata, ComicMetadata.comic_id == Comic.id)
            .where(
                Comic.publish_status == PUBLISH_STATUS_SCHEDULED,
                ComicMetadata.publish_date.is_(None),
            )
            .order_by(
                ComicMetadata.publishing_queue_pos.is_(None),
                ComicMetadata.publishing_queue_pos,
                Comic.id,
            ),
            error_message="Error getting publishing queue",
        ).all()
        return [
            QueueEntry(comic_id=row.id, name=row.name, position=row.publishing_queue_pos)
            for row in rows
        ]

    def move_in_queue(self, comic_id: int, direction: int) -> None:
        """Swap a comic with its neighbour in the queue.

        ``direction`` is -1 to publish sooner and +1 to publish later. The
        comic currently holding the target position takes the old one.
        Moving past either end of the queue leaves a gap that the next
        recalculation closes.

        Raises:
            ValidationError: If ``direction`` is not -1 or 1.
            NotFoundError: If the comic has no queue position.
        """
        if direction not in QUEUE_DIRECTIONS:
            raise ValidationError(f"Invalid queue direction: {direction}")

        log_ctx = {"comic_id": comic_id, "direction": direction}
        old_pos = self.store.execute(
            select(ComicMetadata.publishing_queue_pos).where(ComicMetadata.comic_id == comic_id),
            error_message="Error getting queue position",
            **log_ctx,
        ).scalar_one_or_none()
        if old_pos is None:
            raise NotFoundError("Comic is not in the publishing queue", **log_ctx)
        new_pos = old_pos + direction

        # The displaced comic must move first, or both would share new_pos.
        self.store.execute_batch(
            [
                BatchStatement(
                    update(ComicMetadata)
                    .where(ComicMetadata.publishing_queue_pos == new_pos)
                    .values({ComicMetadata.publishing_queue_pos: old_pos})
                    .execution_options(synchronize_session=False),
                    error_log_message="Error moving displaced comic in queue",
                ),
                BatchStatement(
                    update(ComicMetadata)
                    .where(ComicMetadata.comic_id == comic_id)
                    .values({ComicMetadata.publishing_queue_pos: new_pos})
                    .execution_options(synchronize_session=False),
                    error_log_message="Error moving comic in queue",
                ),
            ],
            error_message="Error moving comic in publishing queue",
            **log_ctx,
        )
        logger.info("Comic %d moved from queue position %d to %d", comic_id, old_pos, new_pos)

    def recalculate(self) -> list[QueueEntry]:
        """Renumber the queue to ``1..N``, keeping relative order.

        Comics that have no position yet are appended by comic id. Only rows
        whose position changes are written. Running it twice in a row is a
        no-op the second time.

        Returns:
            The queue in its new order.
        """
        current = self.get_queue()
        renumbered = [
            QueueEntry(comic_id=entry.comic_id, name=entry.name, position=index)
            for index, entry in enumerate(current, start=1)
        ]

        statements = [
            BatchStatement(
                update(ComicMetadata)
                .where(ComicMetadata.comic_id == new.comic_id)
                .values({ComicMetadata.publishing_queue_pos: new.position})
                .execution_options(synchronize_session=False),
                error_log_message=f"Error updating queue position of comic {new.comic_id}",
            )
            for old, new in zip(current, renumbered)
            if old.position != new.position
        ]
        self.store.execute_batch(
            statements,
            error_message="Error recalculating publishing queue",
            queue_length=len(renumbered),
        )

        logger.info(
            "Publishing queue recalculated: %d entries, %d positions changed",
            len(renumbered),
            len(statements),
        )
        return renumbered

    def schedule_comic(
        self,
        comic_id: int,
        mod_id: int,
        publish_date: date | None = None,
    ) -> None:
        """Schedule a pending comic for publishing.

        Without ``publish_date`` the comic joins the end of the queue on the
        next recalculation. Scheduling an already scheduled comic
        reschedules it.

        Raises:
            NotFoundError: If the comic does not exist.
            InvalidStateError: If the comic is neither pending nor scheduled.
        """
        log_ctx = {"comic_id": comic_id, "mod_id": mod_id}
        self._require_status(_SCHEDULABLE_STATUSES, **log_ctx)

        self.store.execute_batch(
            [
                BatchStatement(
                    update(Comic)
                    .where(Comic.id == comic_id)
                    .values({Comic.publish_status: PUBLISH_STATUS_SCHEDULED})
                    .execution_options(synchronize_session=False),
                    error_log_message="Error updating comic publish status",
                ),
                BatchStatement(
                    update(ComicMetadata)
                    .where(ComicMetadata.comic_id == comic_id)
                    .values(
                        {
                            ComicMetadata.publish_date: publish_date,
                            ComicMetadata.schedule_mod_id: mod_id,
                            ComicMetadata.publishing_queue_pos: None,
                        }
                    )
                    .execution_options(synchronize_session=False),
                    error_log_message="Error updating comic schedule",
                ),
            ],
            error_message="Error scheduling comic",
            **log_ctx,
        )
        logger.info("Comic %d scheduled by mod %d (publish date %s)", comic_id, mod_id, publish_date)

    def unschedule_comic(self, comic_id: int) -> None:
        """Return a scheduled comic to pending and drop it from the queue."""
        log_ctx = {"comic_id": comic_id}
        self._require_status((PUBLISH_STATUS_SCHEDULED,), **log_ctx)

        self.store.execute_batch(
            [
                BatchStatement(
                    update(Comic)
                    .where(Comic.id == comic_id)
                    .values({Comic.publish_status: PUBLISH_STATUS_PENDING})
                    .execution_options(synchronize_session=False),
                    error_log_message="Error updating comic publish status",
                ),
                BatchStatement(
                    update(ComicMetadata)
                    .where(ComicMetadata.comic_id == comic_id)
                    .values(
                        {
                            ComicMetadata.publish_date: None,
                            ComicMetadata.schedule_mod_id: None,
                            ComicMetadata.publishing_queue_pos: None,
                        }
                    )
                    .execution_options(synchronize_session=False),
                    error_log_message="Error clearing comic schedule",
                ),
            ],
            error_message="Error unscheduling comic",
            **log_ctx,
        )
        logger.info("Comic %d unscheduled", comic_id)

    def relist_comic(self, comic_id: int) -> None:
        """Publish an unlisted comic again."""
        log_ctx = {"comic_id": comic_id}
        self._require_status((PUBLISH_STATUS_UNLISTED,), **log_ctx)

        self.store.execute_batch(
            [
                BatchStatement(
                    update(Comic)
                    .where(Comic.id == comic_id)
                    .values({Comic.publish_status: PUBLISH_STATUS_PUBLISHED})
                    .execution_options(synchronize_session=False),
                    error_log_message="Error updating comic publish status",
                ),
                BatchStatement(
                    update(ComicMetadata)
                    .where(ComicMetadata.comic_id == comic_id)
                    .values({ComicMetadata.unlist_comment: None})
                    .execution_options(synchronize_session=False),
                    error_log_message="Error clearing unlist comment",
                ),
            ],
            error_message="Error relisting comic",
            **log_ctx,
        )
        logger.info("Comic %d relisted", comic_id)

    def _require_status(self, allowed: tuple[str, ...], **log_ctx: Any) -> str:
        status = self.store.execute(
            select(Comic.publish_status).where(Comic.id == log_ctx["comic_id"]),
            error_message="Error getting comic status",
            **log_ctx,
        ).scalar_one_or_none()
        if status is None:
            raise NotFoundError("Comic not found", **log_ctx)
        if status not in allowed:
            raise InvalidStateError(f"Comic is {status}, expected {' or '.join(allowed)}", **log_ctx)
        return status
