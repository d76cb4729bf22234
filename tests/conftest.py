"""Shared pytest fixtures for the verification service tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.config.settings import Settings
from src.infrastructure.db.database import Database
from src.infrastructure.db.repository import unit_of_work_factory
from tests.utils import JWT_SECRET, RecordingDispatcher, StepClock, add_user


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        jwt_secret=JWT_SECRET,
        smtp_host="",
        log_level="WARNING",
    )


@pytest.fixture()
def database() -> Iterator[Database]:
    """Fresh in-memory SQLite database per test."""
    db = Database("sqlite://")
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture()
def uow_factory(database: Database):
    return unit_of_work_factory(database)


@pytest.fixture()
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture()
def clock() -> StepClock:
    return StepClock()


@pytest.fixture()
def app(settings: Settings, database: Database, dispatcher: RecordingDispatcher) -> FastAPI:
    return create_app(settings=settings, database=database, notifier=dispatcher)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def users(database: Database) -> dict[str, str]:
    """A provider, a seeker and an admin."""
    return {
        "provider": add_user(database, "user-provider", user_type="provider"),
        "seeker": add_user(database, "user-seeker", user_type="seeker", first_name="Luis", last_name="Diaz"),
        "admin": add_user(database, "user-admin", user_type="seeker", role="admin"),
    }
