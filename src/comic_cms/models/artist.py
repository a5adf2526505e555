"""SQLAlchemy models for artists and their external links."""

from sqlalchemy import Boolean, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from comic_cms.db.session import Base


class Artist(Base):
    """Comic author.

    Artists submitted by regular users stay pending until a moderator
    approves the comic that introduced them.
    """

    __tablename__ = "artist"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    e621_name: Mapped[str | None] = mapped_column("e621Name", Text, nullable=True)
    patreon_name: Mapped[str | None] = mapped_column("patreonName", Text, nullable=True)
    is_pending: Mapped[bool] = mapped_column("isPending", Boolean, nullable=False, default=False)


class ArtistLink(Base):
    """External URL belonging to an artist."""

    __tablename__ = "artistlink"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    artist_id: Mapped[int] = mapped_column(
        "artistId",
        Integer,
        ForeignKey("artist.id", ondelete="CASCADE"),
        nullable=False,
    )
    link_url: Mapped[str] = mapped_column("linkUrl", Text, nullable=False)
