"""SQLAlchemy models for tags (keywords) and their comic associations."""

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from comic_cms.db.session import Base


class Keyword(Base):
    """A tag that can be attached to comics."""

    __tablename__ = "keyword"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)


class ComicKeyword(Base):
    """Join table mapping tags onto comics."""

    __tablename__ = "comickeyword"

    comic_id: Mapped[int] = mapped_column(
        "comicId",
        Integer,
        ForeignKey("comic.id", ondelete="CASCADE"),
        primary_key=True,
    )
    keyword_id: Mapped[int] = mapped_column(
        "keywordId",
        Integer,
        ForeignKey("keyword.id", ondelete="CASCADE"),
        primary_key=True,
    )
