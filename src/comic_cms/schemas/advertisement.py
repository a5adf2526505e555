"""Advertisement schemas."""

from typing import Literal

from .common import CamelModel

AdStatus = Literal["PENDING", "ACTIVE", "ENDED"]


class EditAdRequest(CamelModel):
    """Body of an advertisement edit.

    ``status`` may only be sent by moderators.
    """

    id: str | None = None
    ad_type: str | None = None
    ad_name: str | None = None
    link: str | None = None
    main_text: str | None = None
    secondary_text: str | None = None
    notes_comments: str | None = None
    status: AdStatus | None = None
