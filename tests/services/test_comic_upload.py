"""Tests for the comic submission pipeline."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from comic_cms.core.errors import DataStoreError, NotFoundError, ValidationError
from comic_cms.models import (
    Artist,
    ArtistLink,
    Comic,
    ComicKeyword,
    ComicLink,
    ComicMetadata,
    ComicNameBan,
    ContributionPoints,
)
from comic_cms.models.contribution import ALL_TIME_BUCKET
from comic_cms.schemas.upload import ComicTiny, ComicUpload, NewArtist
from comic_cms.services.comic_upload import ComicSubmissionPipeline, is_username_url


def _count(db_session, model) -> int:
    return db_session.scalar(select(func.count()).select_from(model))


def _upload(**overrides) -> ComicUpload:
    values = {
        "comic_name": "Great Comic",
        "classification": "furry",
        "category": "MF",
        "state": "finished",
        "number_of_pages": 12,
        "new_artist": NewArtist(artist_name="New Person", links=["https://a.example"]),
    }
    values.update(overrides)
    return ComicUpload(**values)


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"comic_name": "  "}, "Comic name is required"),
        ({"comic_name": "A"}, "at least 2 characters"),
        ({"comic_name": "What?"}, "illegal characters"),
        ({"comic_name": "a/b"}, "illegal characters"),
        ({"comic_name": "Issue #2"}, "illegal characters"),
        ({"comic_name": "back\\slash"}, "illegal characters"),
        ({"category": None}, "Category is required"),
        ({"state": ""}, "State is required"),
        ({"new_artist": None}, "Artist is required"),
        ({"artist_id": 1}, "not both"),
        ({"new_artist": NewArtist(artist_name=" ")}, "Artist name is required"),
        (
            {"new_artist": NewArtist(artist_name="X", e621_name="https://e621.net/x")},
            "e621 name must be a username",
        ),
        (
            {"new_artist": NewArtist(artist_name="X", patreon_name="patreon.com/x")},
            "Patreon name must be a username",
        ),
    ],
)
def test_invalid_submission_writes_nothing(store, db_session, overrides, message) -> None:
    with pytest.raises(ValidationError, match=message):
        ComicSubmissionPipeline(store).submit(_upload(**overrides))

    assert _count(db_session, Comic) == 0
    assert _count(db_session, Artist) == 0


def test_is_username_url() -> None:
    assert is_username_url("https://www.patreon.com/someone")
    assert is_username_url("www.example.com")
    assert not is_username_url("someone_123")


def test_anonymous_submission_with_new_artist(store, db_session, make_keyword) -> None:
    tag_a = make_keyword("tag a")
    tag_b = make_keyword("tag b")
    upload = _upload(
        upload_id="up-1",
        new_artist=NewArtist(
            artist_name=" New Person ",
            e621_name="newperson",
            links=["https://a.example", " ", "https://a.example", "https://b.example"],
        ),
        tag_ids=[tag_a.id, tag_b.id, tag_a.id],
    )

    result = ComicSubmissionPipeline(store).submit(upload, user=None, user_ip="10.0.0.5")

    assert result.publish_status == "uploaded"
    assert result.points_awarded is False

    artist = db_session.get(Artist, result.artist_id)
    assert artist.name == "New Person"
    assert artist.e621_name == "newperson"
    assert artist.is_pending is True
    links = db_session.scalars(
        select(ArtistLink.link_url).where(ArtistLink.artist_id == artist.id).order_by(ArtistLink.id)
    ).all()
    assert links == ["https://a.example", "https://b.example"]

    comic = db_session.get(Comic, result.comic_id)
    assert comic.name == "Great Comic"
    assert comic.publish_status == "uploaded"
    assert comic.artist_id == artist.id

    metadata = db_session.get(ComicMetadata, result.comic_id)
    assert metadata.upload_user_id is None
    assert metadata.upload_user_ip == "10.0.0.5"
    assert metadata.upload_id == "up-1"
    assert metadata.verdict is None

    tags = db_session.scalars(
        select(ComicKeyword.keyword_id).where(ComicKeyword.comic_id == result.comic_id)
    ).all()
    assert sorted(tags) == sorted([tag_a.id, tag_b.id])
    assert _count(db_session, ContributionPoints) == 0


def test_anonymous_submission_without_ip_records_unknown(store, db_session) -> None:
    result = ComicSubmissionPipeline(store).submit(_upload())

    assert db_session.get(ComicMetadata, result.comic_id).upload_user_ip == "unknown"


def test_registered_user_submission_records_user_id(store, db_session, test_user) -> None:
    result = ComicSubmissionPipeline(store).submit(_upload(), user=test_user, user_ip="10.0.0.5")

    metadata = db_session.get(ComicMetadata, result.comic_id)
    assert metadata.upload_user_id == test_user.id
    assert metadata.upload_user_ip is None
    assert result.publish_status == "uploaded"


def test_mod_submission_skips_review_and_earns_points(store, db_session, mod_user, artist) -> None:
    upload = _upload(new_artist=None, artist_id=artist.id)

    result = ComicSubmissionPipeline(store).submit(upload, user=mod_user)

    assert result.publish_status == "pending"
    assert result.artist_id == artist.id
    assert result.points_awarded is True
    assert db_session.get(ComicMetadata, result.comic_id).verdict == "excellent"

    all_time = db_session.get(ContributionPoints, (mod_user.id, ALL_TIME_BUCKET))
    assert all_time.comic_upload_excellent == 1


def test_mod_created_artist_is_not_pending(store, db_session, mod_user) -> None:
    result = ComicSubmissionPipeline(store).submit(_upload(), user=mod_user)

    assert db_session.get(Artist, result.artist_id).is_pending is False


def test_series_links(store, db_session, make_comic) -> None:
    previous = make_comic("Part 1")
    following = make_comic("Part 3")

    result = ComicSubmissionPipeline(store).submit(
        _upload(
            comic_name="Part 2",
            previous_comic=ComicTiny(id=previous.id),
            next_comic=ComicTiny(id=following.id),
        )
    )

    pairs = set(db_session.execute(select(ComicLink.first_comic, ComicLink.last_comic)).tuples())
    assert pairs == {(previous.id, result.comic_id), (result.comic_id, following.id)}


def test_duplicate_name_is_rejected_case_insensitively(store, db_session, make_comic) -> None:
    make_comic("Great Comic")

    with pytest.raises(ValidationError, match="already exists"):
        ComicSubmissionPipeline(store).submit(_upload(comic_name="great comic"))
    assert _count(db_session, Artist) == 1


def test_banned_name_is_rejected(store, db_session) -> None:
    db_session.add(ComicNameBan(name="Great Comic"))
    db_session.commit()

    with pytest.raises(ValidationError, match="banned"):
        ComicSubmissionPipeline(store).submit(_upload())


def test_existing_artist_must_exist(store, db_session) -> None:
    with pytest.raises(NotFoundError):
        ComicSubmissionPipeline(store).submit(_upload(new_artist=None, artist_id=999))
    assert _count(db_session, Comic) == 0


def test_duplicate_new_artist_name_is_rejected(store, artist) -> None:
    with pytest.raises(ValidationError, match="artist with this name"):
        ComicSubmissionPipeline(store).submit(
            _upload(new_artist=NewArtist(artist_name="existing artist"))
        )


def test_failure_midway_leaves_no_partial_rows(store, db_session, monkeypatch) -> None:
    pipeline = ComicSubmissionPipeline(store)

    def broken_tags(tag_ids, comic_id):
        store.execute(select(1))
        raise DataStoreError("Error creating comic tags", comic_id=comic_id) from IntegrityError(
            "INSERT", {}, Exception("constraint failed")
        )

    monkeypatch.setattr(pipeline, "_create_tags", broken_tags)

    with pytest.raises(DataStoreError):
        pipeline.submit(_upload(tag_ids=[1]))

    assert _count(db_session, Artist) == 0
    assert _count(db_session, ArtistLink) == 0
    assert _count(db_session, Comic) == 0
    assert _count(db_session, ComicMetadata) == 0


def test_points_failure_does_not_fail_mod_submission(store, db_session, mod_user, monkeypatch) -> None:
    pipeline = ComicSubmissionPipeline(store)
    monkeypatch.setattr(pipeline.ledger, "award_best_effort", lambda *args, **kwargs: False)

    result = pipeline.submit(_upload(), user=mod_user)

    assert result.points_awarded is False
    assert db_session.get(Comic, result.comic_id).publish_status == "pending"
