"""Per-user contribution point counters."""

from enum import StrEnum

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import InstrumentedAttribute, Mapped, mapped_column

from comic_cms.db.session import Base

ALL_TIME_BUCKET = "all-time"


class PointCategory(StrEnum):
    """Point categories. Each value is a column of ``contributionpoints``."""

    COMIC_UPLOAD_EXCELLENT = "comicUploadexcellent"
    COMIC_UPLOAD_MINOR_ISSUES = "comicUploadminor-issues"
    COMIC_UPLOAD_MAJOR_ISSUES = "comicUploadmajor-issues"
    COMIC_UPLOAD_PAGE_ISSUES = "comicUploadpage-issues"
    COMIC_UPLOAD_SCRAPPED = "comicUploadscrapped"
    COMIC_UPLOAD_REJECTED = "comicUploadRejected"
    TAG_SUGGESTION = "tagSuggestion"
    TAG_SUGGESTION_REJECTED = "tagSuggestionRejected"
    COMIC_PROBLEM = "comicProblem"
    COMIC_PROBLEM_REJECTED = "comicProblemRejected"
    COMIC_SUGGESTION_GOOD = "comicSuggestiongood"
    COMIC_SUGGESTION_BAD = "comicSuggestionbad"
    COMIC_SUGGESTION_REJECTED = "comicSuggestionRejected"


class ContributionPoints(Base):
    """Point counters for one user and one month (or the all-time bucket)."""

    __tablename__ = "contributionpoints"

    user_id: Mapped[int] = mapped_column(
        "userId",
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # "YYYY-MM" or "all-time".
    year_month: Mapped[str] = mapped_column("yearMonth", String(16), primary_key=True)

    comic_upload_excellent: Mapped[int | None] = mapped_column("comicUploadexcellent", Integer)
    comic_upload_minor_issues: Mapped[int | None] = mapped_column("comicUploadminor-issues", Integer)
    comic_upload_major_issues: Mapped[int | None] = mapped_column("comicUploadmajor-issues", Integer)
    comic_upload_page_issues: Mapped[int | None] = mapped_column("comicUploadpage-issues", Integer)
    comic_upload_scrapped: Mapped[int | None] = mapped_column("comicUploadscrapped", Integer)
    comic_upload_rejected: Mapped[int | None] = mapped_column("comicUploadRejected", Integer)
    tag_suggestion: Mapped[int | None] = mapped_column("tagSuggestion", Integer)
    tag_suggestion_rejected: Mapped[int | None] = mapped_column("tagSuggestionRejected", Integer)
    comic_problem: Mapped[int | None] = mapped_column("comicProblem", Integer)
    comic_problem_rejected: Mapped[int | None] = mapped_column("comicProblemRejected", Integer)
    comic_suggestion_good: Mapped[int | None] = mapped_column("comicSuggestiongood", Integer)
    comic_suggestion_bad: Mapped[int | None] = mapped_column("comicSuggestionbad", Integer)
    comic_suggestion_rejected: Mapped[int | None] = mapped_column(
        "comicSuggestionRejected",
        Integer,
    )


_CATEGORY_ATTRIBUTES: dict[PointCategory, str] = {
    PointCategory.COMIC_UPLOAD_EXCELLENT: "comic_upload_excellent",
    PointCategory.COMIC_UPLOAD_MINOR_ISSUES: "comic_upload_minor_issues",
    PointCategory.COMIC_UPLOAD_MAJOR_ISSUES: "comic_upload_major_issues",
    PointCategory.COMIC_UPLOAD_PAGE_ISSUES: "comic_upload_page_issues",
    PointCategory.COMIC_UPLOAD_SCRAPPED: "comic_upload_scrapped",
    PointCategory.COMIC_UPLOAD_REJECTED: "comic_upload_rejected",
    PointCategory.TAG_SUGGESTION: "tag_suggestion",
    PointCategory.TAG_SUGGESTION_REJECTED: "tag_suggestion_rejected",
    PointCategory.COMIC_PROBLEM: "comic_problem",
    PointCategory.COMIC_PROBLEM_REJECTED: "comic_problem_rejected",
    PointCategory.COMIC_SUGGESTION_GOOD: "comic_suggestion_good",
    PointCategory.COMIC_SUGGESTION_BAD: "comic_suggestion_bad",
    PointCategory.COMIC_SUGGESTION_REJECTED: "comic_suggestion_rejected",
}


def category_column(category: PointCategory) -> InstrumentedAttribute[int | None]:
    """Return the mapped counter attribute for ``category``."""
    return getattr(ContributionPoints, _CATEGORY_ATTRIBUTES[category])
