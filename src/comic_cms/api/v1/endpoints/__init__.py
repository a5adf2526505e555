"""API endpoint modules for version 1."""

from .ads import router as ads_router
from .artists import router as artists_router
from .moderation import router as moderation_router
from .publishing_queue import router as publishing_queue_router
from .uploads import router as uploads_router

__all__ = [
    "ads_router",
    "artists_router",
    "moderation_router",
    "publishing_queue_router",
    "uploads_router",
]
