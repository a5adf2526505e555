# src/comic_cms/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

JSON keys are camelCase to match the web client; Python attributes are snake_case.
"""

from .advertisement import EditAdRequest
from .artist import ArtistDataChanges
from .common import CamelModel, SuccessResponse
from .moderation import (
    AssignActionRequest,
    ProcessAnonUploadRequest,
    ProcessAnonUploadResponse,
    ProcessComicProblemRequest,
    ProcessComicSuggestionRequest,
    ProcessTagSuggestionGroupRequest,
    ProcessTagSuggestionGroupResponse,
    ProcessTagSuggestionRequest,
    SetComicErrorRequest,
    TagSuggestionItemSchema,
)
from .queue import (
    ComicIdRequest,
    MoveInQueueRequest,
    QueueEntryResponse,
    QueueResponse,
    ScheduleComicRequest,
)
from .upload import ComicTiny, ComicUpload, NewArtist, UploadResponse

__all__ = [
    "EditAdRequest",
    "ArtistDataChanges",
    "CamelModel", "SuccessResponse",
    "AssignActionRequest",
    "ProcessAnonUploadRequest", "ProcessAnonUploadResponse",
    "ProcessComicProblemRequest", "ProcessComicSuggestionRequest",
    "ProcessTagSuggestionGroupRequest", "ProcessTagSuggestionGroupResponse",
    "ProcessTagSuggestionRequest", "SetComicErrorRequest", "TagSuggestionItemSchema",
    "ComicIdRequest", "MoveInQueueRequest", "QueueEntryResponse", "QueueResponse",
    "ScheduleComicRequest",
    "ComicTiny", "ComicUpload", "NewArtist", "UploadResponse",
]
