"""initial schema

Revision ID: 5b1e2c9a7d40
Revises:
Create Date: 2026-10-18 09:12:41.518204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b1e2c9a7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

POINT_COLUMNS = (
    "comicUploadexcellent",
    "comicUploadminor-issues",
    "comicUploadmajor-issues",
    "comicUploadpage-issues",
    "comicUploadscrapped",
    "comicUploadRejected",
    "tagSuggestion",
    "tagSuggestionRejected",
    "comicProblem",
    "comicProblemRejected",
    "comicSuggestiongood",
    "comicSuggestionbad",
    "comicSuggestionRejected",
)


def _action_columns() -> list[sa.Column]:
    """Columns shared by user contributions awaiting moderation."""
    return [
        sa.Column("userId", sa.Integer(), nullable=True),
        sa.Column("userIP", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("modId", sa.Integer(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    """Create the comic CMS tables."""
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("userType", sa.String(length=16), nullable=False, server_default="user"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
    )
    op.create_table(
        "artist",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("e621Name", sa.Text(), nullable=True),
        sa.Column("patreonName", sa.Text(), nullable=True),
        sa.Column("isPending", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "artistlink",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("artistId", sa.Integer(), nullable=False),
        sa.Column("linkUrl", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["artistId"], ["artist.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "keyword",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "comic",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("cat", sa.String(length=16), nullable=True),
        sa.Column("tag", sa.String(length=8), nullable=False),
        sa.Column("state", sa.String(length=16), nullable=False),
        sa.Column("numberOfPages", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("artist", sa.Integer(), nullable=True),
        sa.Column(
            "publishStatus", sa.String(length=16), nullable=False, server_default="uploaded"
        ),
        sa.ForeignKeyConstraint(["artist"], ["artist.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "comicmetadata",
        sa.Column("comicId", sa.Integer(), nullable=False),
        sa.Column("uploadUserId", sa.Integer(), nullable=True),
        sa.Column("uploadUserIP", sa.Text(), nullable=True),
        sa.Column("uploadId", sa.Text(), nullable=True),
        sa.Column("errorText", sa.Text(), nullable=True),
        sa.Column("publishDate", sa.Date(), nullable=True),
        sa.Column("publishingQueuePos", sa.Integer(), nullable=True),
        sa.Column("scheduleModId", sa.Integer(), nullable=True),
        sa.Column("verdict", sa.String(length=32), nullable=True),
        sa.Column("modId", sa.Integer(), nullable=True),
        sa.Column("pendingProblemModId", sa.Integer(), nullable=True),
        sa.Column("unlistComment", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["comicId"], ["comic.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["uploadUserId"], ["user.id"]),
        sa.PrimaryKeyConstraint("comicId"),
    )
    op.create_table(
        "comiclink",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("firstComic", sa.Integer(), nullable=False),
        sa.Column("lastComic", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["firstComic"], ["comic.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["lastComic"], ["comic.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "comicnamebanned",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("comicId", sa.Integer(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "comickeyword",
        sa.Column("comicId", sa.Integer(), nullable=False),
        sa.Column("keywordId", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["comicId"], ["comic.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["keywordId"], ["keyword.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("comicId", "keywordId"),
    )
    op.create_table(
        "keywordsuggestion",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("comicId", sa.Integer(), nullable=False),
        sa.Column("keywordId", sa.Integer(), nullable=False),
        sa.Column("isAdding", sa.Boolean(), nullable=False),
        *_action_columns(),
        sa.ForeignKeyConstraint(["comicId"], ["comic.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["keywordId"], ["keyword.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "keywordsuggestiongroup",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("comicId", sa.Integer(), nullable=False),
        sa.Column("userId", sa.Integer(), nullable=True),
        sa.Column("userIP", sa.Text(), nullable=True),
        sa.Column("isProcessed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("modId", sa.Integer(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["comicId"], ["comic.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "keywordsuggestionitem",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("groupId", sa.Integer(), nullable=False),
        sa.Column("keywordId", sa.Integer(), nullable=False),
        sa.Column("isAdding", sa.Boolean(), nullable=False),
        sa.Column("isApproved", sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(["groupId"], ["keywordsuggestiongroup.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["keywordId"], ["keyword.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "comicsuggestion",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("comicName", sa.Text(), nullable=False),
        sa.Column("artistName", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("verdict", sa.String(length=16), nullable=True),
        sa.Column("modComment", sa.Text(), nullable=True),
        *_action_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "comicproblem",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("comicId", sa.Integer(), nullable=False),
        sa.Column("problemCategory", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_action_columns(),
        sa.ForeignKeyConstraint(["comicId"], ["comic.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "contributionpoints",
        sa.Column("userId", sa.Integer(), nullable=False),
        sa.Column("yearMonth", sa.String(length=16), nullable=False),
        *(sa.Column(name, sa.Integer(), nullable=True) for name in POINT_COLUMNS),
        sa.ForeignKeyConstraint(["userId"], ["user.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("userId", "yearMonth"),
    )
    op.create_table(
        "advertisement",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("adType", sa.String(length=16), nullable=False),
        sa.Column("adName", sa.Text(), nullable=False),
        sa.Column("link", sa.Text(), nullable=False),
        sa.Column("mainText", sa.Text(), nullable=True),
        sa.Column("secondaryText", sa.Text(), nullable=True),
        sa.Column("userId", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="PENDING"),
        sa.Column("advertiserNotes", sa.Text(), nullable=True),
        sa.Column("lastActivationDate", sa.DateTime(timezone=True), nullable=True),
        sa.Column("numDaysActive", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("createdDate", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["userId"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Drop the comic CMS tables."""
    for table in (
        "advertisement",
        "contributionpoints",
        "comicproblem",
        "comicsuggestion",
        "keywordsuggestionitem",
        "keywordsuggestiongroup",
        "keywordsuggestion",
        "comickeyword",
        "comicnamebanned",
        "comiclink",
        "comicmetadata",
        "comic",
        "keyword",
        "artistlink",
        "artist",
        "user",
    ):
        op.drop_table(table)
