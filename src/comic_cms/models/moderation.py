"""Models for community contributions awaiting moderator review."""

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from comic_cms.db.session import Base
from comic_cms.db.time import utcnow

ACTION_STATUS_PENDING = "pending"
ACTION_STATUS_APPROVED = "approved"
ACTION_STATUS_REJECTED = "rejected"


class KeywordSuggestion(Base):
    """A single suggestion to add or remove one tag on a comic."""

    __tablename__ = "keywordsuggestion"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    comic_id: Mapped[int] = mapped_column(
        "comicId",
        Integer,
        ForeignKey("comic.id", ondelete="CASCADE"),
        nullable=False,
    )
    keyword_id: Mapped[int] = mapped_column(
        "keywordId",
        Integer,
        ForeignKey("keyword.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_adding: Mapped[bool] = mapped_column("isAdding", Boolean, nullable=False)
    user_id: Mapped[int | None] = mapped_column("userId", Integer, nullable=True)
    user_ip: Mapped[str | None] = mapped_column("userIP", Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ACTION_STATUS_PENDING)
    mod_id: Mapped[int | None] = mapped_column("modId", Integer, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class KeywordSuggestionGroup(Base):
    """A batch of tag suggestions submitted together for one comic."""

    __tablename__ = "keywordsuggestiongroup"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    comic_id: Mapped[int] = mapped_column(
        "comicId",
        Integer,
        ForeignKey("comic.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int | None] = mapped_column("userId", Integer, nullable=True)
    user_ip: Mapped[str | None] = mapped_column("userIP", Text, nullable=True)
    is_processed: Mapped[bool] = mapped_column("isProcessed", Boolean, nullable=False, default=False)
    mod_id: Mapped[int | None] = mapped_column("modId", Integer, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class KeywordSuggestionItem(Base):
    """One tag change inside a suggestion group."""

    __tablename__ = "keywordsuggestionitem"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        "groupId",
        Integer,
        ForeignKey("keywordsuggestiongroup.id", ondelete="CASCADE"),
        nullable=False,
    )
    keyword_id: Mapped[int] = mapped_column(
        "keywordId",
        Integer,
        ForeignKey("keyword.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_adding: Mapped[bool] = mapped_column("isAdding", Boolean, nullable=False)
    # NULL until the group is processed.
    is_approved: Mapped[bool | None] = mapped_column("isApproved", Boolean, nullable=True)


class ComicSuggestion(Base):
    """A user suggestion for a comic that should be added to the site."""

    __tablename__ = "comicsuggestion"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    comic_name: Mapped[str] = mapped_column("comicName", Text, nullable=False)
    artist_name: Mapped[str | None] = mapped_column("artistName", Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[int | None] = mapped_column("userId", Integer, nullable=True)
    user_ip: Mapped[str | None] = mapped_column("userIP", Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ACTION_STATUS_PENDING)
    # good / bad, only set when approved.
    verdict: Mapped[str | None] = mapped_column(String(16), nullable=True)
    mod_comment: Mapped[str | None] = mapped_column("modComment", Text, nullable=True)
    mod_id: Mapped[int | None] = mapped_column("modId", Integer, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class ComicProblem(Base):
    """A user report of a problem with an existing comic."""

    __tablename__ = "comicproblem"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    comic_id: Mapped[int] = mapped_column(
        "comicId",
        Integer,
        ForeignKey("comic.id", ondelete="CASCADE"),
        nullable=False,
    )
    problem_category: Mapped[str] = mapped_column("problemCategory", Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[int | None] = mapped_column("userId", Integer, nullable=True)
    user_ip: Mapped[str | None] = mapped_column("userIP", Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ACTION_STATUS_PENDING)
    mod_id: Mapped[int | None] = mapped_column("modId", Integer, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class ActionType(StrEnum):
    """Kinds of moderation actions that can be assigned to a moderator."""

    COMIC_UPLOAD = "comicUpload"
    COMIC_SUGGESTION = "comicSuggestion"
    COMIC_PROBLEM = "comicProblem"
    PENDING_COMIC_PROBLEM = "pendingComicProblem"
    TAG_SUGGESTION = "tagSuggestion"
    TAG_SUGGESTION_GROUP = "tagSuggestionGroup"
