"""Moderation request and response schemas."""

from typing import Literal

from pydantic import Field

from comic_cms.models.moderation import ActionType

from .common import CamelModel, SuccessResponse


class ProcessTagSuggestionRequest(CamelModel):
    """Verdict on a single tag suggestion."""

    action_id: int
    is_approved: bool
    is_adding: bool
    comic_id: int
    tag_id: int
    suggesting_user_id: int | None = None


class TagSuggestionItemSchema(CamelModel):
    item_id: int
    keyword_id: int
    is_adding: bool
    is_approved: bool


class ProcessTagSuggestionGroupRequest(CamelModel):
    """Verdicts on every item of a tag suggestion group."""

    group_id: int
    comic_id: int
    items: list[TagSuggestionItemSchema]
    suggesting_user_id: int | None = None


class ProcessTagSuggestionGroupResponse(SuccessResponse):
    items: list[TagSuggestionItemSchema]


class ProcessComicProblemRequest(CamelModel):
    action_id: int
    is_approved: bool
    reporting_user_id: int | None = None


class ProcessComicSuggestionRequest(CamelModel):
    """Verdict on a comic suggestion."""

    action_id: int
    is_approved: bool
    verdict: Literal["good", "bad"] | None = Field(
        default=None,
        description="Quality of the suggestion, required when approving",
    )
    mod_comment: str | None = None
    suggesting_user_id: int | None = None


class ProcessAnonUploadRequest(CamelModel):
    """Verdict on a comic uploaded by a regular or anonymous user."""

    comic_id: int
    verdict: Literal["approved", "rejected", "rejected-list"]
    comic_name: str | None = Field(
        default=None,
        description="Name to put on the ban list for rejected-list verdicts",
    )
    upload_verdict: str | None = Field(
        default=None,
        description="Upload quality credited to the uploader on approval",
    )


class ProcessAnonUploadResponse(SuccessResponse):
    publish_status: str


class AssignActionRequest(CamelModel):
    action_id: int
    action_type: ActionType


class SetComicErrorRequest(CamelModel):
    """Set or clear a comic's error flag; an empty or missing text clears it."""

    comic_id: int
    error_text: str | None = None
