"""SQLAlchemy models for comics, their metadata and series links."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from comic_cms.db.session import Base
from comic_cms.db.time import utcnow

# Publishing state machine:
# uploaded -> pending | rejected | rejected-list (mod review of user uploads)
# pending -> scheduled -> published, scheduled -> pending (unschedule)
# uploaded/pending -> unlisted, unlisted -> published (relist)
PUBLISH_STATUS_UPLOADED = "uploaded"
PUBLISH_STATUS_PENDING = "pending"
PUBLISH_STATUS_SCHEDULED = "scheduled"
PUBLISH_STATUS_PUBLISHED = "published"
PUBLISH_STATUS_UNLISTED = "unlisted"
PUBLISH_STATUS_REJECTED = "rejected"
PUBLISH_STATUS_REJECTED_LIST = "rejected-list"

# Quality verdicts for uploads; each maps to a comicUpload<verdict> points column.
UPLOAD_VERDICT_EXCELLENT = "excellent"
UPLOAD_VERDICTS = ("excellent", "minor-issues", "major-issues", "page-issues", "scrapped")


class Comic(Base):
    """A comic and its publishing status."""

    __tablename__ = "comic"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    # furry / pokemon / mlp / other
    classification: Mapped[str | None] = mapped_column("cat", String(16), nullable=True)
    # M / F / MF / MM / FF / MF+ / I
    category: Mapped[str] = mapped_column("tag", String(8), nullable=False)
    state: Mapped[str] = mapped_column(String(16), nullable=False)
    number_of_pages: Mapped[int] = mapped_column("numberOfPages", Integer, nullable=False, default=0)
    artist_id: Mapped[int | None] = mapped_column(
        "artist",
        Integer,
        ForeignKey("artist.id"),
        nullable=True,
    )
    publish_status: Mapped[str] = mapped_column(
        "publishStatus",
        String(16),
        nullable=False,
        default=PUBLISH_STATUS_UPLOADED,
    )


class ComicMetadata(Base):
    """Moderation and scheduling data kept alongside a comic (1:1)."""

    __tablename__ = "comicmetadata"

    comic_id: Mapped[int] = mapped_column(
        "comicId",
        Integer,
        ForeignKey("comic.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Exactly one of these identifies the uploader.
    upload_user_id: Mapped[int | None] = mapped_column(
        "uploadUserId",
        Integer,
        ForeignKey("user.id"),
        nullable=True,
    )
    upload_user_ip: Mapped[str | None] = mapped_column("uploadUserIP", Text, nullable=True)
    upload_id: Mapped[str | None] = mapped_column("uploadId", Text, nullable=True)
    error_text: Mapped[str | None] = mapped_column("errorText", Text, nullable=True)
    publish_date: Mapped[date | None] = mapped_column("publishDate", Date, nullable=True)
    # Unique among scheduled comics without a publish date once recalculated.
    publishing_queue_pos: Mapped[int | None] = mapped_column(
        "publishingQueuePos",
        Integer,
        nullable=True,
    )
    schedule_mod_id: Mapped[int | None] = mapped_column("scheduleModId", Integer, nullable=True)
    verdict: Mapped[str | None] = mapped_column(String(32), nullable=True)
    mod_id: Mapped[int | None] = mapped_column("modId", Integer, nullable=True)
    pending_problem_mod_id: Mapped[int | None] = mapped_column(
        "pendingProblemModId",
        Integer,
        nullable=True,
    )
    unlist_comment: Mapped[str | None] = mapped_column("unlistComment", Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class ComicLink(Base):
    """Series link from one comic to the next."""

    __tablename__ = "comiclink"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_comic: Mapped[int] = mapped_column(
        "firstComic",
        Integer,
        ForeignKey("comic.id", ondelete="CASCADE"),
        nullable=False,
    )
    last_comic: Mapped[int] = mapped_column(
        "lastComic",
        Integer,
        ForeignKey("comic.id", ondelete="CASCADE"),
        nullable=False,
    )


class ComicNameBan(Base):
    """Comic names rejected for content reasons; blocks re-submission."""

    __tablename__ = "comicnamebanned"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    comic_id: Mapped[int | None] = mapped_column("comicId", Integer, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
