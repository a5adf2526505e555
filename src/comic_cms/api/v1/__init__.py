"""Version 1 API endpoints."""

from .endpoints import (
    ads_router,
    artists_router,
    moderation_router,
    publishing_queue_router,
    uploads_router,
)

__all__ = [
    "ads_router",
    "artists_router",
    "moderation_router",
    "publishing_queue_router",
    "uploads_router",
]
