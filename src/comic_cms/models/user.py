"""SQLAlchemy models for site accounts."""

from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from comic_cms.db.session import Base

USER_TYPE_USER = "user"
USER_TYPE_MODERATOR = "moderator"
USER_TYPE_ADMIN = "admin"

MOD_USER_TYPES = frozenset({USER_TYPE_MODERATOR, USER_TYPE_ADMIN})


class User(Base):
    """Registered account. Authentication itself happens upstream."""

    __tablename__ = "user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_type: Mapped[str] = mapped_column(
        "userType",
        String(16),
        nullable=False,
        default=USER_TYPE_USER,
    )

    @property
    def is_mod(self) -> bool:
        """Return True for moderators and admins."""
        return self.user_type in MOD_USER_TYPES
