# src/comic_cms/models/__init__.py
"""SQLAlchemy models for the comic CMS."""

from .advertisement import Advertisement
from .artist import Artist, ArtistLink
from .comic import Comic, ComicLink, ComicMetadata, ComicNameBan
from .contribution import ContributionPoints, PointCategory
from .keyword import ComicKeyword, Keyword
from .moderation import (
    ComicProblem,
    ComicSuggestion,
    KeywordSuggestion,
    KeywordSuggestionGroup,
    KeywordSuggestionItem,
)
from .user import User

__all__ = [
    "Advertisement",
    "Artist", "ArtistLink",
    "Comic", "ComicLink", "ComicMetadata", "ComicNameBan",
    "ContributionPoints", "PointCategory",
    "ComicKeyword", "Keyword",
    "ComicProblem", "ComicSuggestion",
    "KeywordSuggestion", "KeywordSuggestionGroup", "KeywordSuggestionItem",
    "User",
]
