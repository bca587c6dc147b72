"""Tests for persistence backend selection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from shared.db import SqliteCarRepository, SqliteUserRepository
from shared.memory import InMemoryCarRepository, InMemoryStore, InMemoryUserRepository
from shared.persistence import (
    BackendUnavailableError,
    PersistenceBackend,
    PersistenceMode,
    connect_database,
    select_backend,
)

if TYPE_CHECKING:
    from pathlib import Path


def _unreachable_path(tmp_path: Path) -> Path:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    return blocker / "storage.db"


class TestConnectDatabase:
    def test_opens_database(self, tmp_path: Path):
        db = connect_database(tmp_path / "storage.db")
        assert db.connection is not None
        db.close()

    def test_wraps_failures(self, tmp_path: Path):
        with pytest.raises(BackendUnavailableError, match="Cannot open database"):
            connect_database(_unreachable_path(tmp_path))


class TestSelectBackend:
    def test_connected_when_database_opens(self, tmp_path: Path):
        backend = select_backend(tmp_path / "storage.db")

        assert backend.mode == PersistenceMode.CONNECTED
        assert backend.mode.value == "connected"
        assert isinstance(backend.user_repo, SqliteUserRepository)
        assert isinstance(backend.car_repo, SqliteCarRepository)
        backend.close()

    def test_falls_back_to_memory_when_unreachable(self, tmp_path: Path, caplog):
        backend = select_backend(_unreachable_path(tmp_path))

        assert backend.mode == PersistenceMode.DEMO
        assert backend.mode.value == "demo mode"
        assert isinstance(backend.user_repo, InMemoryUserRepository)
        assert isinstance(backend.car_repo, InMemoryCarRepository)
        assert backend.database is None
        assert "falling back to in-memory" in caplog.text

    def test_force_demo_skips_database(self, tmp_path: Path):
        path = tmp_path / "storage.db"
        backend = select_backend(path, force_demo=True)

        assert backend.mode == PersistenceMode.DEMO
        assert not path.exists()


class TestPersistenceBackend:
    def test_in_memory_uses_given_store(self):
        store = InMemoryStore()
        backend = PersistenceBackend.in_memory(store)
        assert backend.memory is store

    def test_close_is_safe_for_memory_backend(self):
        PersistenceBackend.in_memory().close()

    def test_close_closes_database(self, tmp_path: Path):
        backend = PersistenceBackend.sqlite(connect_database(tmp_path / "storage.db"))
        backend.close()

        assert backend.database is not None
        with pytest.raises(RuntimeError, match="not connected"):
            _ = backend.database.connection
