# src/comic_cms/services/__init__.py
"""Business logic services for the comic CMS."""

from .advertising import AdEditor
from .artists import ArtistEditor
from .comic_upload import ComicSubmissionPipeline, SubmissionResult
from .contribution_points import ContributionPointsLedger
from .moderation import ModerationActionProcessor, TagSuggestionItemVerdict
from .publishing_queue import PublishingQueueManager, QueueEntry
from .queue_tasks import QueueRecalculationDispatcher

__all__ = [
    "AdEditor",
    "ArtistEditor",
    "ComicSubmissionPipeline",
    "SubmissionResult",
    "ContributionPointsLedger",
    "ModerationActionProcessor",
    "TagSuggestionItemVerdict",
    "PublishingQueueManager",
    "QueueEntry",
    "QueueRecalculationDispatcher",
]
