# mypy: ignore-errors
"""Tests for the HTTP API: routing, auth and error mapping."""

from fastapi import status
from sqlalchemy.exc import OperationalError

from comic_cms.models import (
    Comic,
    ComicMetadata,
    ComicSuggestion,
    KeywordSuggestion,
    KeywordSuggestionGroup,
    KeywordSuggestionItem,
)


def test_anonymous_upload(client, db_session) -> None:
    response = client.post(
        "/api/v1/uploads",
        json={
            "comicName": "Api Comic",
            "classification": "pokemon",
            "category": "F",
            "state": "wip",
            "numberOfPages": 3,
            "newArtist": {"artistName": "Api Artist", "links": []},
        },
        headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["success"] is True
    assert data["publishStatus"] == "uploaded"
    assert db_session.get(ComicMetadata, data["comicId"]).upload_user_ip == "203.0.113.7"


def test_mod_upload_is_pending(client, mod_auth_token, artist) -> None:
    response = client.post(
        "/api/v1/uploads",
        json={
            "comicName": "Mod Comic",
            "category": "M",
            "state": "finished",
            "artistId": artist.id,
        },
        headers=mod_auth_token,
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["publishStatus"] == "pending"


def test_upload_validation_maps_to_400(client) -> None:
    response = client.post("/api/v1/uploads", json={"comicName": "#1", "category": "M"})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Comic name contains illegal characters"


def test_bad_token_is_401(client) -> None:
    response = client.post(
        "/api/v1/uploads",
        json={"comicName": "Whatever"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_admin_routes_require_mod(client, auth_token) -> None:
    response = client.get("/api/v1/admin/publishing-queue", headers=auth_token)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_admin_routes_require_token(client) -> None:
    response = client.get("/api/v1/admin/publishing-queue")

    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_not_found_maps_to_404(client, mod_auth_token) -> None:
    response = client.post(
        "/api/v1/admin/set-comic-error",
        json={"comicId": 12345, "errorText": "bad"},
        headers=mod_auth_token,
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Comic not found"


def test_claim_conflict_maps_to_409(
    client, db_session, mod_user, other_mod_user, headers_for
) -> None:
    suggestion = ComicSuggestion(comic_name="Wanted")
    db_session.add(suggestion)
    db_session.commit()
    body = {"actionId": suggestion.id, "actionType": "comicSuggestion"}

    first = client.post("/api/v1/admin/assign-action", json=body, headers=headers_for(mod_user))
    second = client.post(
        "/api/v1/admin/assign-action", json=body, headers=headers_for(other_mod_user)
    )

    assert first.status_code == status.HTTP_200_OK
    assert second.status_code == status.HTTP_409_CONFLICT
    assert db_session.get(ComicSuggestion, suggestion.id).mod_id == mod_user.id


def test_unknown_action_type_is_rejected(client, mod_auth_token) -> None:
    response = client.post(
        "/api/v1/admin/assign-action",
        json={"actionId": 1, "actionType": "user"},
        headers=mod_auth_token,
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_data_store_failure_maps_to_generic_500(
    app, db_session, mod_auth_token, make_comic, monkeypatch
) -> None:
    from fastapi.testclient import TestClient

    comic = make_comic("Uploaded")
    original_execute = db_session.execute

    def broken_execute(statement, params=None, *args, **kwargs):
        if statement.is_dml:
            raise OperationalError("UPDATE comic", {}, Exception("secret driver detail"))
        return original_execute(statement, params, *args, **kwargs)

    monkeypatch.setattr(db_session, "execute", broken_execute)

    with TestClient(app, base_url="http://test", raise_server_exceptions=False) as client:
        response = client.post(
            "/api/v1/admin/process-anon-upload",
            json={"comicId": comic.id, "verdict": "approved"},
            headers=mod_auth_token,
        )

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"detail": "Internal server error"}
    monkeypatch.undo()
    assert db_session.get(Comic, comic.id).publish_status == "uploaded"


def test_process_tag_suggestion(client, db_session, mod_auth_token, make_comic, make_keyword) -> None:
    comic = make_comic("Tag me", publish_status="published")
    keyword = make_keyword("tagged")
    suggestion = KeywordSuggestion(comic_id=comic.id, keyword_id=keyword.id, is_adding=True)
    db_session.add(suggestion)
    db_session.commit()

    response = client.post(
        "/api/v1/admin/process-tag-suggestion",
        json={
            "actionId": suggestion.id,
            "isApproved": True,
            "isAdding": True,
            "comicId": comic.id,
            "tagId": keyword.id,
        },
        headers=mod_auth_token,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}


def test_tag_group_with_foreign_items_is_400(
    client, db_session, mod_auth_token, make_comic, make_keyword
) -> None:
    comic = make_comic("Grouped", publish_status="published")
    keyword = make_keyword("grouped")
    group = KeywordSuggestionGroup(comic_id=comic.id)
    db_session.add(group)
    db_session.flush()
    db_session.add(KeywordSuggestionItem(group_id=group.id, keyword_id=keyword.id, is_adding=True))
    db_session.commit()

    response = client.post(
        "/api/v1/admin/process-tag-suggestion-group",
        json={
            "groupId": group.id,
            "comicId": comic.id,
            "items": [
                {"itemId": 9991, "keywordId": keyword.id, "isAdding": True, "isApproved": True}
            ],
        },
        headers=mod_auth_token,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert db_session.get(KeywordSuggestionGroup, group.id).is_processed is False


def test_unschedule_endpoint(client, db_session, mod_auth_token, make_comic) -> None:
    comic = make_comic("Queued", publish_status="scheduled", queue_pos=1)

    response = client.post(
        "/api/v1/admin/unschedule-comic",
        json={"comicId": comic.id},
        headers=mod_auth_token,
    )

    assert response.status_code == status.HTTP_200_OK
    assert db_session.get(Comic, comic.id).publish_status == "pending"


def test_process_anon_upload_twice_conflicts(client, mod_auth_token, make_comic) -> None:
    comic = make_comic("Uploaded")
    body = {"comicId": comic.id, "verdict": "rejected"}

    first = client.post("/api/v1/admin/process-anon-upload", json=body, headers=mod_auth_token)
    second = client.post("/api/v1/admin/process-anon-upload", json=body, headers=mod_auth_token)

    assert first.json()["publishStatus"] == "rejected"
    assert second.status_code == status.HTTP_409_CONFLICT


def test_schedule_recalculates_queue_in_background(
    client, db_session, mod_auth_token, make_comic
) -> None:
    make_comic("First", publish_status="scheduled", queue_pos=4)
    comic = make_comic("Second", publish_status="pending")

    response = client.post(
        "/api/v1/admin/schedule-comic",
        json={"comicId": comic.id},
        headers=mod_auth_token,
    )
    assert response.status_code == status.HTTP_200_OK

    queue = client.get("/api/v1/admin/publishing-queue", headers=mod_auth_token).json()["queue"]
    assert [(entry["name"], entry["position"]) for entry in queue] == [
        ("First", 1),
        ("Second", 2),
    ]


def test_move_and_recalculate_endpoints(client, mod_auth_token, make_comic) -> None:
    a = make_comic("A", publish_status="scheduled", queue_pos=1)
    make_comic("B", publish_status="scheduled", queue_pos=2)

    moved = client.post(
        "/api/v1/admin/publishing-queue/move",
        json={"comicId": a.id, "direction": 1},
        headers=mod_auth_token,
    )
    recalculated = client.post("/api/v1/admin/publishing-queue/recalculate", headers=mod_auth_token)

    assert moved.status_code == status.HTTP_200_OK
    assert [entry["name"] for entry in recalculated.json()["queue"]] == ["B", "A"]


def test_update_artist_data_endpoint(client, db_session, mod_auth_token, artist) -> None:
    response = client.post(
        "/api/v1/admin/update-artist-data",
        json={"artistId": artist.id, "links": ["https://one.example"]},
        headers=mod_auth_token,
    )

    assert response.status_code == status.HTTP_200_OK


def test_edit_ad_forbidden_for_non_owner(client, auth_token, make_ad, make_user) -> None:
    ad = make_ad(make_user())

    response = client.post(
        "/api/v1/ads/edit",
        json={"id": ad.id, "adType": "card", "adName": "Mine now", "link": "https://x", "mainText": "hi"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
