"""Moderator endpoints for scheduling comics and ordering the publishing queue."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks

from comic_cms.api.v1.dependencies import ModUserDep, QueueDispatcherDep, StoreDep
from comic_cms.schemas.common import SuccessResponse
from comic_cms.schemas.queue import (
    ComicIdRequest,
    MoveInQueueRequest,
    QueueEntryResponse,
    QueueResponse,
    ScheduleComicRequest,
)
from comic_cms.services.publishing_queue import PublishingQueueManager, QueueEntry

router = APIRouter(prefix="/admin", tags=["publishing-queue"])


def _queue_response(entries: list[QueueEntry]) -> QueueResponse:
    return QueueResponse(
        queue=[
            QueueEntryResponse(comic_id=entry.comic_id, name=entry.name, position=entry.position)
            for entry in entries
        ]
    )


@router.get("/publishing-queue", response_model=QueueResponse)
async def get_publishing_queue(store: StoreDep, mod: ModUserDep) -> QueueResponse:
    return _queue_response(PublishingQueueManager(store).get_queue())


@router.post("/publishing-queue/move", response_model=SuccessResponse)
async def move_in_queue(
    body: MoveInQueueRequest,
    store: StoreDep,
    mod: ModUserDep,
) -> SuccessResponse:
    """Move a comic one step earlier (-1) or later (+1) in the queue."""
    PublishingQueueManager(store).move_in_queue(body.comic_id, body.direction)
    return SuccessResponse()


@router.post("/publishing-queue/recalculate", response_model=QueueResponse)
async def recalculate_queue(store: StoreDep, mod: ModUserDep) -> QueueResponse:
    return _queue_response(PublishingQueueManager(store).recalculate())


@router.post("/schedule-comic", response_model=SuccessResponse)
async def schedule_comic(
    body: ScheduleComicRequest,
    store: StoreDep,
    mod: ModUserDep,
    background_tasks: BackgroundTasks,
    dispatcher: QueueDispatcherDep,
) -> SuccessResponse:
    """Schedule a comic; the queue is renumbered after the response is sent."""
    PublishingQueueManager(store).schedule_comic(body.comic_id, mod.id, body.publish_date)
    dispatcher.dispatch(background_tasks)
    return SuccessResponse()


@router.post("/unschedule-comic", response_model=SuccessResponse)
async def unschedule_comic(
    body: ComicIdRequest,
    store: StoreDep,
    mod: ModUserDep,
    background_tasks: BackgroundTasks,
    dispatcher: QueueDispatcherDep,
) -> SuccessResponse:
    PublishingQueueManager(store).unschedule_comic(body.comic_id)
    dispatcher.dispatch(background_tasks)
    return SuccessResponse()


@router.post("/relist-comic", response_model=SuccessResponse)
async def relist_comic(
    body: ComicIdRequest,
    store: StoreDep,
    mod: ModUserDep,
) -> SuccessResponse:
    PublishingQueueManager(store).relist_comic(body.comic_id)
    return SuccessResponse()
