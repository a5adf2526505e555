# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from contextlib import contextmanager
from datetime import date
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("QUEUE_RECALC_RETRY_DELAY_SECONDS", "0")

from comic_cms.api.v1.dependencies import get_queue_dispatcher
from comic_cms.core.security import create_access_token
from comic_cms.db.gateway import DataStore
from comic_cms.db.session import Base
from comic_cms.db.session import get_db as app_get_session
from comic_cms.main import app as fastapi_app
from comic_cms.models import (
    Advertisement,
    Artist,
    Comic,
    ComicMetadata,
    Keyword,
    User,
)
from comic_cms.models.comic import PUBLISH_STATUS_UPLOADED
from comic_cms.models.user import USER_TYPE_MODERATOR, USER_TYPE_USER
from comic_cms.services.contribution_points import ContributionPointsLedger
from comic_cms.services.queue_tasks import QueueRecalculationDispatcher

TEST_DB_URL = "sqlite://"

_NAME_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    # A fresh in-memory database per test; commits never leak between tests.
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store(db_session: Session) -> DataStore:
    return DataStore(db_session)


@pytest.fixture()
def ledger(store: DataStore) -> ContributionPointsLedger:
    return ContributionPointsLedger(store)


@pytest.fixture()
def shared_session_scope(db_session: Session) -> Callable[[], Any]:
    """Session scope handing out the test session without closing it."""

    @contextmanager
    def _scope() -> Iterator[Session]:
        yield db_session

    return _scope


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    shared_session_scope: Callable[[], Any],
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    def _get_dispatcher_override() -> QueueRecalculationDispatcher:
        return QueueRecalculationDispatcher(session_scope=shared_session_scope, retry_delay=0)

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_queue_dispatcher] = _get_dispatcher_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_queue_dispatcher, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory creating persisted users."""

    def _make(user_type: str = USER_TYPE_USER, username: str | None = None) -> User:
        user = User(
            username=username or f"user{next(_NAME_COUNTER)}",
            email=None,
            user_type=user_type,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    return make_user(USER_TYPE_USER, username="regular")


@pytest.fixture()
def mod_user(make_user: Callable[..., User]) -> User:
    return make_user(USER_TYPE_MODERATOR, username="moddy")


@pytest.fixture()
def other_mod_user(make_user: Callable[..., User]) -> User:
    return make_user(USER_TYPE_MODERATOR, username="othermod")


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    return auth_headers


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the regular test user."""
    return auth_headers(test_user)


@pytest.fixture()
def mod_auth_token(mod_user: User) -> dict[str, str]:
    """Return authorization headers for the moderator."""
    return auth_headers(mod_user)


@pytest.fixture()
def artist(db_session: Session) -> Artist:
    artist = Artist(name="Existing Artist", e621_name=None, patreon_name=None, is_pending=False)
    db_session.add(artist)
    db_session.commit()
    return artist


@pytest.fixture()
def make_keyword(db_session: Session) -> Callable[[str], Keyword]:
    def _make(name: str) -> Keyword:
        keyword = Keyword(name=name)
        db_session.add(keyword)
        db_session.commit()
        return keyword

    return _make


@pytest.fixture()
def make_comic(db_session: Session, artist: Artist) -> Callable[..., Comic]:
    """Return a factory creating a comic with its metadata row."""

    def _make(
        name: str | None = None,
        publish_status: str = PUBLISH_STATUS_UPLOADED,
        queue_pos: int | None = None,
        publish_date: date | None = None,
        upload_user_id: int | None = None,
        error_text: str | None = None,
    ) -> Comic:
        comic = Comic(
            name=name or f"Comic {next(_NAME_COUNTER)}",
            classification="furry",
            category="M",
            state="finished",
            number_of_pages=10,
            artist_id=artist.id,
            publish_status=publish_status,
        )
        db_session.add(comic)
        db_session.flush()
        db_session.add(
            ComicMetadata(
                comic_id=comic.id,
                upload_user_id=upload_user_id,
                upload_user_ip=None if upload_user_id else "127.0.0.1",
                publishing_queue_pos=queue_pos,
                publish_date=publish_date,
                error_text=error_text,
            )
        )
        db_session.commit()
        return comic

    return _make


@pytest.fixture()
def make_ad(db_session: Session) -> Callable[..., Advertisement]:
    def _make(owner: User, **overrides: Any) -> Advertisement:
        values: dict[str, Any] = {
            "id": f"ad{next(_NAME_COUNTER)}",
            "ad_type": "card",
            "ad_name": "My ad",
            "link": "https://example.com",
            "main_text": "Read my comic",
            "secondary_text": None,
            "user_id": owner.id,
        }
        values.update(overrides)
        ad = Advertisement(**values)
        db_session.add(ad)
        db_session.commit()
        return ad

    return _make
