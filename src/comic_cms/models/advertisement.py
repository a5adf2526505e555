"""SQLAlchemy model for paid advertisements."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from comic_cms.db.time import utcnow
from comic_cms.db.session import Base

AD_STATUS_PENDING = "PENDING"
AD_STATUS_ACTIVE = "ACTIVE"
AD_STATUS_ENDED = "ENDED"

AD_TYPE_CARD = "card"
AD_TYPE_BANNER = "banner"
AD_TYPE_TOP_SMALL = "topSmall"


class Advertisement(Base):
    """An advertisement owned by a registered user."""

    __tablename__ = "advertisement"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    ad_type: Mapped[str] = mapped_column("adType", String(16), nullable=False)
    ad_name: Mapped[str] = mapped_column("adName", Text, nullable=False)
    link: Mapped[str] = mapped_column(Text, nullable=False)
    main_text: Mapped[str | None] = mapped_column("mainText", Text, nullable=True)
    secondary_text: Mapped[str | None] = mapped_column("secondaryText", Text, nullable=True)
    user_id: Mapped[int] = mapped_column(
        "userId",
        Integer,
        ForeignKey("user.id"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=AD_STATUS_PENDING)
    advertiser_notes: Mapped[str | None] = mapped_column("advertiserNotes", Text, nullable=True)
    # Set while ACTIVE; folded into num_days_active when the ad ends.
    last_activation_date: Mapped[datetime | None] = mapped_column(
        "lastActivationDate",
        DateTime(timezone=True),
        nullable=True,
    )
    num_days_active: Mapped[int] = mapped_column("numDaysActive", Integer, nullable=False, default=0)
    created_date: Mapped[datetime] = mapped_column(
        "createdDate",
        DateTime(timezone=True),
        default=utcnow,
    )
