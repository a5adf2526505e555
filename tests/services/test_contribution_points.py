"""Tests for the contribution points ledger."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from comic_cms.core.errors import LedgerUnavailableError, ValidationError
from comic_cms.models import ContributionPoints, PointCategory
from comic_cms.models.contribution import ALL_TIME_BUCKET
from comic_cms.services.contribution_points import ContributionPointsLedger


def _fixed_clock() -> datetime:
    return datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


def _buckets(db_session, user_id: int) -> dict[str, ContributionPoints]:
    rows = db_session.scalars(
        select(ContributionPoints).where(ContributionPoints.user_id == user_id)
    ).all()
    return {row.year_month: row for row in rows}


def test_award_creates_month_and_all_time_rows(store, db_session, test_user) -> None:
    ledger = ContributionPointsLedger(store, now=_fixed_clock)

    ledger.award(test_user.id, PointCategory.TAG_SUGGESTION)

    buckets = _buckets(db_session, test_user.id)
    assert set(buckets) == {"2024-03", ALL_TIME_BUCKET}
    assert buckets["2024-03"].tag_suggestion == 1
    assert buckets[ALL_TIME_BUCKET].tag_suggestion == 1
    assert buckets["2024-03"].comic_problem is None


def test_award_increments_existing_rows_by_count(store, db_session, test_user) -> None:
    ledger = ContributionPointsLedger(store, now=_fixed_clock)

    ledger.award(test_user.id, "tagSuggestion", 2)
    ledger.award(test_user.id, "tagSuggestion", 3)
    ledger.award(test_user.id, "comicProblem")

    buckets = _buckets(db_session, test_user.id)
    for bucket in ("2024-03", ALL_TIME_BUCKET):
        assert buckets[bucket].tag_suggestion == 5
        assert buckets[bucket].comic_problem == 1


def test_new_month_gets_own_bucket(store, db_session, test_user) -> None:
    ContributionPointsLedger(store, now=_fixed_clock).award(test_user.id, "comicProblem")
    ContributionPointsLedger(
        store, now=lambda: datetime(2024, 4, 1, tzinfo=UTC)
    ).award(test_user.id, "comicProblem")

    buckets = _buckets(db_session, test_user.id)
    assert buckets["2024-03"].comic_problem == 1
    assert buckets["2024-04"].comic_problem == 1
    assert buckets[ALL_TIME_BUCKET].comic_problem == 2


def test_hyphenated_category_column(store, db_session, test_user) -> None:
    ledger = ContributionPointsLedger(store, now=_fixed_clock)

    ledger.award(test_user.id, "comicUploadminor-issues")

    buckets = _buckets(db_session, test_user.id)
    assert buckets[ALL_TIME_BUCKET].comic_upload_minor_issues == 1


def test_anonymous_user_is_a_noop(store, db_session) -> None:
    ContributionPointsLedger(store).award(None, PointCategory.TAG_SUGGESTION)

    assert db_session.scalars(select(ContributionPoints)).all() == []


def test_unknown_category_is_rejected(store, db_session, test_user) -> None:
    with pytest.raises(ValidationError):
        ContributionPointsLedger(store).award(test_user.id, "userId; DROP TABLE comic")

    assert db_session.scalars(select(ContributionPoints)).all() == []


def test_non_positive_count_is_rejected(store, test_user) -> None:
    with pytest.raises(ValidationError):
        ContributionPointsLedger(store).award(test_user.id, PointCategory.TAG_SUGGESTION, 0)


def test_failed_write_raises_ledger_unavailable_and_keeps_nothing(
    store, db_session, test_user, monkeypatch
) -> None:
    ledger = ContributionPointsLedger(store, now=_fixed_clock)
    original_execute = db_session.execute
    calls = {"n": 0}

    def flaky_execute(statement, params=None, *args, **kwargs):
        calls["n"] += 1
        # Fail on the second bucket write.
        if calls["n"] == 3:
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))
        return original_execute(statement, params, *args, **kwargs)

    monkeypatch.setattr(db_session, "execute", flaky_execute)

    with pytest.raises(LedgerUnavailableError) as exc_info:
        ledger.award(test_user.id, PointCategory.TAG_SUGGESTION)

    monkeypatch.undo()
    assert exc_info.value.context["user_id"] == test_user.id
    assert db_session.scalars(select(ContributionPoints)).all() == []


def test_award_best_effort_swallows_store_failures(store, test_user, monkeypatch, caplog) -> None:
    ledger = ContributionPointsLedger(store)

    def broken_award(*args, **kwargs):
        raise LedgerUnavailableError("Error adding contribution points", user_id=test_user.id)

    monkeypatch.setattr(ledger, "award", broken_award)

    with caplog.at_level("WARNING"):
        assert ledger.award_best_effort(test_user.id, PointCategory.TAG_SUGGESTION) is False
    assert "Contribution points not recorded" in caplog.text


def test_award_best_effort_reports_success(store, test_user) -> None:
    assert ContributionPointsLedger(store).award_best_effort(test_user.id, "tagSuggestion") is True
    assert ContributionPointsLedger(store).award_best_effort(None, "tagSuggestion") is False
