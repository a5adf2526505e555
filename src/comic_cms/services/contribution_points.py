"""Contribution points ledger.

Every award increments two rows for the user: the current month's bucket
and the ``all-time`` bucket. Rows are created on first use.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import func, insert, select, update

from comic_cms.core.errors import DataStoreError, LedgerUnavailableError, ValidationError
from comic_cms.db.gateway import DataStore
from comic_cms.db.time import utcnow, year_month
from comic_cms.models.contribution import (
    ALL_TIME_BUCKET,
    ContributionPoints,
    PointCategory,
    category_column,
)

logger = logging.getLogger(__name__)


def coerce_category(category: PointCategory | str) -> PointCategory:
    """Return ``category`` as a ``PointCategory``.

    Raises:
        ValidationError: If the name is not a known points column.
    """
    try:
        return PointCategory(category)
    except ValueError as err:
        raise ValidationError(f"Unknown contribution points category: {category}") from err


class ContributionPointsLedger:
    """Records contribution points for registered users."""

    def __init__(self, store: DataStore, now: Callable[[], datetime] = utcnow) -> None:
        """Initialize the ledger.

        Args:
            store: Gateway used for all reads and writes.
            now: Clock used to pick the monthly bucket.
        """
        self.store = store
        self._now = now

    def award(
        self,
        user_id: int | None,
        category: PointCategory | str,
        count: int = 1,
    ) -> None:
        """Add ``count`` points in ``category`` for ``user_id``.

        Anonymous contributors (``user_id is None``) are ignored. Both buckets
        are written in one transaction.

        Raises:
            ValidationError: If the category is unknown or ``count`` is not positive.
            LedgerUnavailableError: If the points could not be stored.
        """
        if user_id is None:
            return

        point_category = coerce_category(category)
        if count < 1:
            raise ValidationError("Points count must be positive", count=count)

        month = year_month(self._now())
        column = category_column(point_category)
        log_ctx = {"user_id": user_id, "category": point_category.value, "year_month": month}

        try:
            with self.store.transaction("Error adding contribution points", **log_ctx):
                existing = set(
                    self.store.execute(
                        select(ContributionPoints.year_month).where(
                            ContributionPoints.user_id == user_id,
                            ContributionPoints.year_month.in_([month, ALL_TIME_BUCKET]),
                        ),
                        error_message="Error reading contribution points",
                        **log_ctx,
                    ).scalars()
                )

                for bucket in (ALL_TIME_BUCKET, month):
                    if bucket in existing:
                        self.store.execute(
                            update(ContributionPoints)
                            .where(
                                ContributionPoints.user_id == user_id,
                                ContributionPoints.year_month == bucket,
                            )
                            .values({column: func.coalesce(column, 0) + count})
                            .execution_options(synchronize_session=False),
                            error_message="Error updating contribution points",
                            **log_ctx,
                        )
                    else:
                        self.store.execute(
                            insert(ContributionPoints).values(
                                {
                                    ContributionPoints.user_id: user_id,
                                    ContributionPoints.year_month: bucket,
                                    column: count,
                                }
                            ),
                            error_message="Error adding contribution points",
                            **log_ctx,
                        )
        except DataStoreError as exc:
            raise LedgerUnavailableError(exc.message, **log_ctx) from exc

    def award_best_effort(
        self,
        user_id: int | None,
        category: PointCategory | str,
        count: int = 1,
    ) -> bool:
        """Award points without failing the caller.

        Used after a primary write has already committed; a ledger failure is
        logged and reported as ``False``.
        """
        if user_id is None:
            return False
        try:
            self.award(user_id, category, count)
        except LedgerUnavailableError as exc:
            logger.warning("Contribution points not recorded: %s", exc, exc_info=True)
            return False
        return True
