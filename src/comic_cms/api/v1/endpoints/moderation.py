"""Moderator endpoints for processing community contributions."""

from __future__ import annotations

from fastapi import APIRouter

from comic_cms.api.v1.dependencies import ModUserDep, StoreDep
from comic_cms.schemas.common import SuccessResponse
from comic_cms.schemas.moderation import (
    AssignActionRequest,
    ProcessAnonUploadRequest,
    ProcessAnonUploadResponse,
    ProcessComicProblemRequest,
    ProcessComicSuggestionRequest,
    ProcessTagSuggestionGroupRequest,
    ProcessTagSuggestionGroupResponse,
    ProcessTagSuggestionRequest,
    SetComicErrorRequest,
    TagSuggestionItemSchema,
)
from comic_cms.services.moderation import ModerationActionProcessor, TagSuggestionItemVerdict

router = APIRouter(prefix="/admin", tags=["moderation"])


@router.post("/process-tag-suggestion", response_model=SuccessResponse)
async def process_tag_suggestion(
    body: ProcessTagSuggestionRequest,
    store: StoreDep,
    mod: ModUserDep,
) -> SuccessResponse:
    ModerationActionProcessor(store).process_tag_suggestion(
        action_id=body.action_id,
        mod_id=mod.id,
        is_approved=body.is_approved,
        is_adding=body.is_adding,
        comic_id=body.comic_id,
        tag_id=body.tag_id,
        suggesting_user_id=body.suggesting_user_id,
    )
    return SuccessResponse()


@router.post("/process-tag-suggestion-group", response_model=ProcessTagSuggestionGroupResponse)
async def process_tag_suggestion_group(
    body: ProcessTagSuggestionGroupRequest,
    store: StoreDep,
    mod: ModUserDep,
) -> ProcessTagSuggestionGroupResponse:
    """Process a tag suggestion group and return the items as applied."""
    items = [
        TagSuggestionItemVerdict(
            item_id=item.item_id,
            keyword_id=item.keyword_id,
            is_adding=item.is_adding,
            is_approved=item.is_approved,
        )
        for item in body.items
    ]
    final_items = ModerationActionProcessor(store).process_tag_suggestion_group(
        group_id=body.group_id,
        mod_id=mod.id,
        comic_id=body.comic_id,
        items=items,
        suggesting_user_id=body.suggesting_user_id,
    )
    return ProcessTagSuggestionGroupResponse(
        items=[
            TagSuggestionItemSchema(
                item_id=item.item_id,
                keyword_id=item.keyword_id,
                is_adding=item.is_adding,
                is_approved=item.is_approved,
            )
            for item in final_items
        ]
    )


@router.post("/process-comic-problem", response_model=SuccessResponse)
async def process_comic_problem(
    body: ProcessComicProblemRequest,
    store: StoreDep,
    mod: ModUserDep,
) -> SuccessResponse:
    ModerationActionProcessor(store).process_comic_problem(
        action_id=body.action_id,
        mod_id=mod.id,
        is_approved=body.is_approved,
        reporting_user_id=body.reporting_user_id,
    )
    return SuccessResponse()


@router.post("/process-comic-suggestion", response_model=SuccessResponse)
async def process_comic_suggestion(
    body: ProcessComicSuggestionRequest,
    store: StoreDep,
    mod: ModUserDep,
) -> SuccessResponse:
    ModerationActionProcessor(store).process_comic_suggestion(
        action_id=body.action_id,
        mod_id=mod.id,
        is_approved=body.is_approved,
        verdict=body.verdict,
        mod_comment=body.mod_comment,
        suggesting_user_id=body.suggesting_user_id,
    )
    return SuccessResponse()


@router.post("/process-anon-upload", response_model=ProcessAnonUploadResponse)
async def process_anon_upload(
    body: ProcessAnonUploadRequest,
    store: StoreDep,
    mod: ModUserDep,
) -> ProcessAnonUploadResponse:
    """Approve or reject a comic uploaded by a regular user."""
    new_status = ModerationActionProcessor(store).process_anon_upload(
        comic_id=body.comic_id,
        mod_id=mod.id,
        verdict=body.verdict,
        comic_name=body.comic_name,
        upload_verdict=body.upload_verdict,
    )
    return ProcessAnonUploadResponse(publish_status=new_status)


@router.post("/assign-action", response_model=SuccessResponse)
async def assign_action(
    body: AssignActionRequest,
    store: StoreDep,
    mod: ModUserDep,
) -> SuccessResponse:
    """Claim a moderation action for the calling moderator."""
    ModerationActionProcessor(store).assign_action(body.action_id, body.action_type, mod.id)
    return SuccessResponse()


@router.post("/unassign-action", response_model=SuccessResponse)
async def unassign_action(
    body: AssignActionRequest,
    store: StoreDep,
    mod: ModUserDep,
) -> SuccessResponse:
    ModerationActionProcessor(store).unassign_action(body.action_id, body.action_type)
    return SuccessResponse()


@router.post("/set-comic-error", response_model=SuccessResponse)
async def set_comic_error(
    body: SetComicErrorRequest,
    store: StoreDep,
    mod: ModUserDep,
) -> SuccessResponse:
    ModerationActionProcessor(store).set_comic_error(body.comic_id, body.error_text)
    return SuccessResponse()
