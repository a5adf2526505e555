"""Moderation services: processing contributions and assigning actions.

Each processor follows the same pattern: update the action's status,
mutate the primary record, commit, then credit the contributor. The status
and record writes share one transaction; the points award runs afterwards
and only logs on failure.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.orm import InstrumentedAttribute

from comic_cms.core.errors import (
    ActionAlreadyClaimedError,
    ActionAlreadyProcessedError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from comic_cms.db.gateway import BatchStatement, DataStore
from comic_cms.db.session import Base
from comic_cms.models import (
    Comic,
    ComicKeyword,
    ComicMetadata,
    ComicNameBan,
    ComicProblem,
    ComicSuggestion,
    KeywordSuggestion,
    KeywordSuggestionGroup,
    KeywordSuggestionItem,
    PointCategory,
)
from comic_cms.models.comic import (
    PUBLISH_STATUS_PENDING,
    PUBLISH_STATUS_REJECTED,
    PUBLISH_STATUS_REJECTED_LIST,
    PUBLISH_STATUS_UPLOADED,
    UPLOAD_VERDICT_EXCELLENT,
    UPLOAD_VERDICTS,
)
from comic_cms.models.moderation import (
    ACTION_STATUS_APPROVED,
    ACTION_STATUS_PENDING,
    ACTION_STATUS_REJECTED,
    ActionType,
)
from comic_cms.services.contribution_points import ContributionPointsLedger

logger = logging.getLogger(__name__)

ANON_VERDICT_APPROVED = "approved"
ANON_VERDICT_REJECTED = "rejected"
ANON_VERDICT_REJECTED_LIST = "rejected-list"

_ANON_VERDICT_STATUSES = {
    ANON_VERDICT_APPROVED: PUBLISH_STATUS_PENDING,
    ANON_VERDICT_REJECTED: PUBLISH_STATUS_REJECTED,
    ANON_VERDICT_REJECTED_LIST: PUBLISH_STATUS_REJECTED_LIST,
}

COMIC_SUGGESTION_VERDICTS = ("good", "bad")


@dataclass(frozen=True)
class ActionTarget:
    """Where an action type's moderator assignment is stored."""

    model: type[Base]
    id_column: InstrumentedAttribute[Any]
    mod_id_column: InstrumentedAttribute[Any]

    @property
    def table(self) -> str:
        return self.model.__tablename__


# Closed mapping; table and column names never come from request input.
ACTION_TARGETS: dict[ActionType, ActionTarget] = {
    ActionType.COMIC_UPLOAD: ActionTarget(
        ComicMetadata, ComicMetadata.comic_id, ComicMetadata.mod_id
    ),
    ActionType.COMIC_SUGGESTION: ActionTarget(
        ComicSuggestion, ComicSuggestion.id, ComicSuggestion.mod_id
    ),
    ActionType.COMIC_PROBLEM: ActionTarget(ComicProblem, ComicProblem.id, ComicProblem.mod_id),
    ActionType.PENDING_COMIC_PROBLEM: ActionTarget(
        ComicMetadata, ComicMetadata.comic_id, ComicMetadata.pending_problem_mod_id
    ),
    ActionType.TAG_SUGGESTION: ActionTarget(
        KeywordSuggestion, KeywordSuggestion.id, KeywordSuggestion.mod_id
    ),
    ActionType.TAG_SUGGESTION_GROUP: ActionTarget(
        KeywordSuggestionGroup, KeywordSuggestionGroup.id, KeywordSuggestionGroup.mod_id
    ),
}


def action_target(action_type: ActionType | str) -> ActionTarget:
    """Return the storage target for ``action_type``.

    Raises:
        ValidationError: For unknown action types.
    """
    try:
        return ACTION_TARGETS[ActionType(action_type)]
    except ValueError as err:
        raise ValidationError(f"Unknown action type: {action_type}") from err


@dataclass(frozen=True)
class TagSuggestionItemVerdict:
    """A moderator's decision on one item of a tag suggestion group."""

    item_id: int
    keyword_id: int
    is_adding: bool
    is_approved: bool


class ModerationActionProcessor:
    """Applies moderator verdicts to pending contributions."""

    def __init__(self, store: DataStore, ledger: ContributionPointsLedger | None = None) -> None:
        self.store = store
        self.ledger = ledger or ContributionPointsLedger(store)

    # Assignment

    def assign_action(self, action_id: int, action_type: ActionType | str, mod_id: int) -> None:
        """Claim an action for ``mod_id``.

        The claim only succeeds while nobody else holds the action; claiming
        an action you already hold is a no-op.

        Raises:
            NotFoundError: If the action does not exist.
            ActionAlreadyClaimedError: If another moderator holds it.
        """
        target = action_target(action_type)
        log_ctx = {"action_id": action_id, "action_type": str(action_type), "mod_id": mod_id}

        with self.store.transaction("Error assigning action to mod", **log_ctx):
            result = self.store.execute(
                update(target.model)
                .where(
                    target.id_column == action_id,
                    or_(target.mod_id_column.is_(None), target.mod_id_column == mod_id),
                )
                .values({target.mod_id_column: mod_id})
                .execution_options(synchronize_session=False),
                error_message="Error assigning action to mod",
                **log_ctx,
            )
            if result.rowcount == 0:
                self._require_action(target, **log_ctx)
                raise ActionAlreadyClaimedError(
                    "Action is already assigned to another mod",
                    **log_ctx,
                )

        logger.info("Action %s %d assigned to mod %d", action_type, action_id, mod_id)

    def unassign_action(self, action_id: int, action_type: ActionType | str) -> None:
        """Release an action so another moderator can claim it."""
        target = action_target(action_type)
        log_ctx = {"action_id": action_id, "action_type": str(action_type)}

        with self.store.transaction("Error unassigning action", **log_ctx):
            result = self.store.execute(
                update(target.model)
                .where(target.id_column == action_id)
                .values({target.mod_id_column: None})
                .execution_options(synchronize_session=False),
                error_message="Error unassigning action",
                **log_ctx,
            )
            if result.rowcount == 0:
                raise NotFoundError("Action not found", **log_ctx)

    def _require_action(self, target: ActionTarget, **log_ctx: Any) -> None:
        found = self.store.execute(
            select(target.id_column).where(target.id_column == log_ctx["action_id"]),
            error_message="Error looking up action",
            **log_ctx,
        ).first()
        if found is None:
            raise NotFoundError("Action not found", **log_ctx)

    # Tag suggestions

    def process_tag_suggestion(
        self,
        action_id: int,
        mod_id: int,
        is_approved: bool,
        is_adding: bool,
        comic_id: int,
        tag_id: int,
        suggesting_user_id: int | None = None,
    ) -> None:
        """Approve or reject a single tag suggestion.

        On approval the tag is added to or removed from the comic. A tag that
        is already in the requested state is left alone.
        """
        log_ctx = {"action_id": action_id, "comic_id": comic_id, "tag_id": tag_id}
        suggestion = self.store.execute(
            select(KeywordSuggestion.status, KeywordSuggestion.user_id).where(
                KeywordSuggestion.id == action_id
            ),
            error_message="Error getting tag suggestion",
            **log_ctx,
        ).first()
        if suggestion is None:
            raise NotFoundError("Tag suggestion not found", **log_ctx)
        if suggestion.status != ACTION_STATUS_PENDING:
            raise ActionAlreadyProcessedError("Tag suggestion already processed", **log_ctx)

        statements = [
            BatchStatement(
                update(KeywordSuggestion)
                .where(KeywordSuggestion.id == action_id)
                .values(
                    {
                        KeywordSuggestion.status: (
                            ACTION_STATUS_APPROVED if is_approved else ACTION_STATUS_REJECTED
                        ),
                        KeywordSuggestion.mod_id: mod_id,
                    }
                )
                .execution_options(synchronize_session=False),
                error_log_message="Error updating tag suggestion",
            )
        ]

        if is_approved:
            is_present = tag_id in self._comic_tag_ids(comic_id)
            if is_adding and not is_present:
                statements.append(
                    BatchStatement(
                        insert(ComicKeyword).values(
                            {ComicKeyword.comic_id: comic_id, ComicKeyword.keyword_id: tag_id}
                        ),
                        error_log_message="Error adding comic tag",
                    )
                )
            elif not is_adding and is_present:
                statements.append(
                    BatchStatement(
                        delete(ComicKeyword)
                        .where(ComicKeyword.comic_id == comic_id, ComicKeyword.keyword_id == tag_id)
                        .execution_options(synchronize_session=False),
                        error_log_message="Error removing comic tag",
                    )
                )

        self.store.execute_batch(
            statements,
            error_message="Error updating action+tag in tag suggestion processing",
            **log_ctx,
        )

        user_id = suggesting_user_id if suggesting_user_id is not None else suggestion.user_id
        category = (
            PointCategory.TAG_SUGGESTION if is_approved else PointCategory.TAG_SUGGESTION_REJECTED
        )
        self.ledger.award_best_effort(user_id, category)

    def process_tag_suggestion_group(
        self,
        group_id: int,
        mod_id: int,
        comic_id: int,
        items: Sequence[TagSuggestionItemVerdict],
        suggesting_user_id: int | None = None,
    ) -> list[TagSuggestionItemVerdict]:
        """Process every item of a tag suggestion group.

        ``items`` must name every stored item of the group exactly once. The
        keyword and direction of each item are read from the stored rows;
        only the approval flag comes from the moderator.

        Approved additions of tags the comic already has (and approved
        removals of tags it lacks) are flipped to not approved so a group can
        never apply the same change twice. Points equal the number of items
        that end up approved.

        Returns:
            The items with their final approval flags.

        Raises:
            ValidationError: If ``comic_id`` or the item ids do not match the group.
        """
        log_ctx = {"group_id": group_id, "comic_id": comic_id, "mod_id": mod_id}
        group = self.store.execute(
            select(
                KeywordSuggestionGroup.is_processed,
                KeywordSuggestionGroup.user_id,
                KeywordSuggestionGroup.comic_id,
            ).where(KeywordSuggestionGroup.id == group_id),
            error_message="Error getting tag suggestion group",
            **log_ctx,
        ).first()
        if group is None:
            raise NotFoundError("Tag suggestion group not found", **log_ctx)
        if group.is_processed:
            raise ActionAlreadyProcessedError("Tag suggestion group already processed", **log_ctx)
        if group.comic_id != comic_id:
            raise ValidationError("Tag suggestion group belongs to another comic", **log_ctx)

        stored_items = {
            row.id: row
            for row in self.store.execute(
                select(
                    KeywordSuggestionItem.id,
                    KeywordSuggestionItem.keyword_id,
                    KeywordSuggestionItem.is_adding,
                ).where(KeywordSuggestionItem.group_id == group_id),
                error_message="Error getting tag suggestion items",
                **log_ctx,
            )
        }
        requested_ids = [item.item_id for item in items]
        if len(set(requested_ids)) != len(requested_ids) or set(requested_ids) != set(stored_items):
            raise ValidationError("Items do not match the tag suggestion group", **log_ctx)

        current_tags = self._comic_tag_ids(comic_id)
        final_items: list[TagSuggestionItemVerdict] = []
        tags_to_add: list[int] = []
        tags_to_remove: list[int] = []

        for item in items:
            stored = stored_items[item.item_id]
            item = replace(item, keyword_id=stored.keyword_id, is_adding=stored.is_adding)
            if item.is_approved:
                if item.is_adding and item.keyword_id in current_tags:
                    item = replace(item, is_approved=False)
                elif not item.is_adding and item.keyword_id not in current_tags:
                    item = replace(item, is_approved=False)

            if item.is_approved:
                if item.is_adding:
                    tags_to_add.append(item.keyword_id)
                    current_tags.add(item.keyword_id)
                else:
                    tags_to_remove.append(item.keyword_id)
                    current_tags.discard(item.keyword_id)
            final_items.append(item)

        statements: list[BatchStatement] = []
        if tags_to_add:
            statements.append(
                BatchStatement(
                    insert(ComicKeyword),
                    [{"comic_id": comic_id, "keyword_id": tag_id} for tag_id in tags_to_add],
                    error_log_message="Error inserting new comic tags",
                )
            )
        if tags_to_remove:
            statements.append(
                BatchStatement(
                    delete(ComicKeyword)
                    .where(
                        ComicKeyword.comic_id == comic_id,
                        ComicKeyword.keyword_id.in_(tags_to_remove),
                    )
                    .execution_options(synchronize_session=False),
                    error_log_message="Error removing comic tags",
                )
            )
        for item in final_items:
            statements.append(
                BatchStatement(
                    update(KeywordSuggestionItem)
                    .where(
                        KeywordSuggestionItem.id == item.item_id,
                        KeywordSuggestionItem.group_id == group_id,
                    )
                    .values({KeywordSuggestionItem.is_approved: item.is_approved})
                    .execution_options(synchronize_session=False),
                    error_log_message=f"Error updating tag suggestion item {item.item_id}",
                )
            )
        statements.append(
            BatchStatement(
                update(KeywordSuggestionGroup)
                .where(KeywordSuggestionGroup.id == group_id)
                .values({KeywordSuggestionGroup.is_processed: True, KeywordSuggestionGroup.mod_id: mod_id})
                .execution_options(synchronize_session=False),
                error_log_message="Error marking tag suggestion group processed",
            )
        )

        self.store.execute_batch(
            statements,
            error_message="Error processing tag suggestion group",
            **log_ctx,
        )

        approved_count = sum(1 for item in final_items if item.is_approved)
        if approved_count:
            user_id = suggesting_user_id if suggesting_user_id is not None else group.user_id
            self.ledger.award_best_effort(user_id, PointCategory.TAG_SUGGESTION, approved_count)

        logger.info(
            "Tag suggestion group %d processed: %d added, %d removed",
            group_id,
            len(tags_to_add),
            len(tags_to_remove),
        )
        return final_items

    def _comic_tag_ids(self, comic_id: int) -> set[int]:
        return set(
            self.store.execute(
                select(ComicKeyword.keyword_id).where(ComicKeyword.comic_id == comic_id),
                error_message="Error getting comic tags",
                comic_id=comic_id,
            ).scalars()
        )

    # Comic problems and suggestions

    def process_comic_problem(
        self,
        action_id: int,
        mod_id: int,
        is_approved: bool,
        reporting_user_id: int | None = None,
    ) -> None:
        """Resolve a comic problem report."""
        log_ctx = {"action_id": action_id, "mod_id": mod_id}
        problem = self.store.execute(
            select(ComicProblem.status, ComicProblem.user_id).where(ComicProblem.id == action_id),
            error_message="Error getting comic problem",
            **log_ctx,
        ).first()
        if problem is None:
            raise NotFoundError("Comic problem not found", **log_ctx)
        if problem.status != ACTION_STATUS_PENDING:
            raise ActionAlreadyProcessedError("Comic problem already processed", **log_ctx)

        with self.store.transaction("Error updating comic problem", **log_ctx):
            self.store.execute(
                update(ComicProblem)
                .where(ComicProblem.id == action_id)
                .values(
                    {
                        ComicProblem.status: (
                            ACTION_STATUS_APPROVED if is_approved else ACTION_STATUS_REJECTED
                        ),
                        ComicProblem.mod_id: mod_id,
                    }
                )
                .execution_options(synchronize_session=False),
                error_message="Error updating comic problem",
                **log_ctx,
            )

        user_id = reporting_user_id if reporting_user_id is not None else problem.user_id
        category = (
            PointCategory.COMIC_PROBLEM if is_approved else PointCategory.COMIC_PROBLEM_REJECTED
        )
        self.ledger.award_best_effort(user_id, category)

    def process_comic_suggestion(
        self,
        action_id: int,
        mod_id: int,
        is_approved: bool,
        verdict: str | None = None,
        mod_comment: str | None = None,
        suggesting_user_id: int | None = None,
    ) -> None:
        """Resolve a comic suggestion.

        ``verdict`` (good/bad) is required when approving; ``mod_comment`` is
        typically only given when rejecting. Each is only written if provided.
        """
        log_ctx = {"action_id": action_id, "mod_id": mod_id, "verdict": verdict}
        if verdict is not None and verdict not in COMIC_SUGGESTION_VERDICTS:
            raise ValidationError(f"Invalid comic suggestion verdict: {verdict}")
        if is_approved and verdict is None:
            raise ValidationError("A verdict is required when approving a comic suggestion")

        suggestion = self.store.execute(
            select(ComicSuggestion.status, ComicSuggestion.user_id).where(
                ComicSuggestion.id == action_id
            ),
            error_message="Error getting comic suggestion",
            **log_ctx,
        ).first()
        if suggestion is None:
            raise NotFoundError("Comic suggestion not found", **log_ctx)
        if suggestion.status != ACTION_STATUS_PENDING:
            raise ActionAlreadyProcessedError("Comic suggestion already processed", **log_ctx)

        values: dict[Any, Any] = {
            ComicSuggestion.status: ACTION_STATUS_APPROVED if is_approved else ACTION_STATUS_REJECTED,
            ComicSuggestion.mod_id: mod_id,
        }
        if verdict:
            values[ComicSuggestion.verdict] = verdict
        if mod_comment:
            values[ComicSuggestion.mod_comment] = mod_comment

        with self.store.transaction("Error updating comic suggestion", **log_ctx):
            self.store.execute(
                update(ComicSuggestion)
                .where(ComicSuggestion.id == action_id)
                .values(values)
                .execution_options(synchronize_session=False),
                error_message="Error updating comic suggestion",
                **log_ctx,
            )

        user_id = suggesting_user_id if suggesting_user_id is not None else suggestion.user_id
        if is_approved:
            category = f"comicSuggestion{verdict}"
        else:
            category = PointCategory.COMIC_SUGGESTION_REJECTED
        self.ledger.award_best_effort(user_id, category)

    # Uploads awaiting review

    def process_anon_upload(
        self,
        comic_id: int,
        mod_id: int,
        verdict: str,
        comic_name: str | None = None,
        upload_verdict: str | None = None,
    ) -> str:
        """Apply a moderator verdict to a user-uploaded comic.

        ``approved`` moves the comic to pending, ``rejected`` rejects it and
        ``rejected-list`` additionally adds its name to the ban list.

        Args:
            comic_id: The uploaded comic.
            mod_id: Acting moderator.
            verdict: approved, rejected or rejected-list.
            comic_name: Corrected name for the ban list; defaults to the comic's name.
            upload_verdict: Quality verdict credited to the uploader on approval.

        Returns:
            The comic's new publish status.
        """
        log_ctx = {"comic_id": comic_id, "mod_id": mod_id, "verdict": verdict}
        new_status = _ANON_VERDICT_STATUSES.get(verdict)
        if new_status is None:
            raise ValidationError(f"Invalid upload verdict: {verdict}")
        if verdict == ANON_VERDICT_APPROVED:
            upload_verdict = upload_verdict or UPLOAD_VERDICT_EXCELLENT
            if upload_verdict not in UPLOAD_VERDICTS:
                raise ValidationError(f"Invalid upload quality verdict: {upload_verdict}")

        row = self.store.execute(
            select(Comic.name, Comic.publish_status, ComicMetadata.upload_user_id)
            .join(ComicMetadata, ComicMetadata.comic_id == Comic.id)
            .where(Comic.id == comic_id),
            error_message="Error getting uploaded comic",
            **log_ctx,
        ).first()
        if row is None:
            raise NotFoundError("Comic not found", **log_ctx)
        if row.publish_status != PUBLISH_STATUS_UPLOADED:
            raise InvalidStateError(
                f"Comic is {row.publish_status}, not awaiting upload review",
                **log_ctx,
            )

        metadata_values: dict[Any, Any] = {ComicMetadata.mod_id: mod_id}
        if verdict == ANON_VERDICT_APPROVED:
            metadata_values[ComicMetadata.verdict] = upload_verdict

        statements = [
            BatchStatement(
                update(Comic)
                .where(Comic.id == comic_id)
                .values({Comic.publish_status: new_status})
                .execution_options(synchronize_session=False),
                error_log_message="Error updating comic publish status",
            ),
            BatchStatement(
                update(ComicMetadata)
                .where(ComicMetadata.comic_id == comic_id)
                .values(metadata_values)
                .execution_options(synchronize_session=False),
                error_log_message="Error updating comic metadata",
            ),
        ]
        if verdict == ANON_VERDICT_REJECTED_LIST:
            banned_name = (comic_name or row.name).strip()
            statements.append(
                BatchStatement(
                    insert(ComicNameBan).values(
                        {ComicNameBan.name: banned_name, ComicNameBan.comic_id: comic_id}
                    ),
                    error_log_message="Error adding comic name to ban list",
                )
            )

        self.store.execute_batch(
            statements,
            error_message="Error processing uploaded comic",
            **log_ctx,
        )

        if verdict == ANON_VERDICT_APPROVED:
            category = f"comicUpload{upload_verdict}"
        else:
            category = PointCategory.COMIC_UPLOAD_REJECTED
        self.ledger.award_best_effort(row.upload_user_id, category)

        logger.info("Uploaded comic %d processed as %s", comic_id, verdict)
        return new_status

    # Error flags

    def set_comic_error(self, comic_id: int, error_text: str | None) -> None:
        """Set or clear a comic's moderation error flag.

        Clearing the flag also releases the moderator assigned to the
        pending problem.
        """
        if error_text is not None:
            error_text = error_text.strip() or None

        values: dict[Any, Any] = {ComicMetadata.error_text: error_text}
        if error_text is None:
            values[ComicMetadata.pending_problem_mod_id] = None

        log_ctx = {"comic_id": comic_id}
        with self.store.transaction("Error setting comic error", **log_ctx):
            result = self.store.execute(
                update(ComicMetadata)
                .where(ComicMetadata.comic_id == comic_id)
                .values(values)
                .execution_options(synchronize_session=False),
                error_message="Error setting comic error",
                **log_ctx,
            )
            if result.rowcount == 0:
                raise NotFoundError("Comic not found", **log_ctx)
