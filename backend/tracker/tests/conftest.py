"""Shared fixtures for tracker tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from starlette.testclient import TestClient

from shared.auth.settings import AuthSettings
from shared.persistence import PersistenceBackend, connect_database
from tracker.server.app import create_app
from tracker.server.settings import TrackerServerSettings

if TYPE_CHECKING:
    from pathlib import Path

    from starlette.applications import Starlette

TEST_SESSION_SECRET = "test-session-secret"


def build_app(backend: PersistenceBackend, tmp_path: Path) -> Starlette:
    return create_app(
        settings=TrackerServerSettings(database_path=str(tmp_path / "unused.db"), log_dir=None),
        auth_settings=AuthSettings(session_secret=TEST_SESSION_SECRET, password_hasher="simple"),
        backend=backend,
    )


@pytest.fixture
def sqlite_backend(tmp_path: Path):
    backend = PersistenceBackend.sqlite(connect_database(tmp_path / "storage.db"))
    yield backend
    backend.close()


@pytest.fixture
def memory_backend():
    return PersistenceBackend.in_memory()


@pytest.fixture
def app(sqlite_backend, tmp_path: Path) -> Starlette:
    return build_app(sqlite_backend, tmp_path)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_client(app):
    """Return a factory for extra clients (separate cookie jars) on the same app."""
    return lambda: TestClient(app)


@pytest.fixture
def make_app(tmp_path: Path):
    """Return a factory building the app around a given persistence backend."""
    return lambda backend: build_app(backend, tmp_path)
