"""Background recalculation of the publishing queue.

Scheduling and unscheduling leave gaps in the queue numbering. Instead of
recalculating inside the request, routers hand the work to
``QueueRecalculationDispatcher``, which runs after the response is sent in a
session of its own. Failures are retried and logged; the request that
triggered the recalculation never sees them.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from contextlib import AbstractContextManager

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from comic_cms.core.errors import DataStoreError
from comic_cms.core.settings import settings
from comic_cms.db.gateway import DataStore
from comic_cms.db.session import session_scope as default_session_scope
from comic_cms.services.publishing_queue import PublishingQueueManager

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AbstractContextManager[Session]]


class QueueRecalculationDispatcher:
    """Runs ``PublishingQueueManager.recalculate`` outside the request."""

    def __init__(
        self,
        session_scope: SessionScope | None = None,
        max_attempts: int | None = None,
        retry_delay: float | None = None,
    ) -> None:
        self.session_scope = session_scope or default_session_scope
        self.max_attempts = max(1, max_attempts or settings.queue_recalc_max_attempts)
        self.retry_delay = (
            settings.queue_recalc_retry_delay_seconds if retry_delay is None else retry_delay
        )

    def dispatch(self, background_tasks: BackgroundTasks) -> None:
        """Queue a recalculation to run once the response has been sent."""
        background_tasks.add_task(self.run)

    def run(self) -> bool:
        """Recalculate the queue, retrying on data store failures.

        Returns:
            True if a recalculation succeeded, False once attempts ran out.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                with self.session_scope() as session:
                    PublishingQueueManager(DataStore(session)).recalculate()
                return True
            except DataStoreError as exc:
                logger.warning(
                    "Publishing queue recalculation failed (attempt %d of %d): %s",
                    attempt,
                    self.max_attempts,
                    exc,
                    exc_info=exc.__cause__ is not None,
                )
                if attempt < self.max_attempts and self.retry_delay > 0:
                    time.sleep(self.retry_delay)

        logger.error(
            "Giving up on publishing queue recalculation after %d attempts",
            self.max_attempts,
        )
        return False
