"""Publishing queue schemas."""

from datetime import date
from typing import Literal

from .common import CamelModel, SuccessResponse


class QueueEntryResponse(CamelModel):
    comic_id: int
    name: str
    position: int | None = None


class QueueResponse(SuccessResponse):
    """The publishing queue in order."""

    queue: list[QueueEntryResponse]


class MoveInQueueRequest(CamelModel):
    comic_id: int
    direction: Literal[-1, 1]


class ScheduleComicRequest(CamelModel):
    """Schedule a comic; without ``publish_date`` it joins the queue."""

    comic_id: int
    publish_date: date | None = None


class ComicIdRequest(CamelModel):
    comic_id: int
