"""Tests for AuthSessionStore."""

from __future__ import annotations

import asyncio
import time
from unittest.mock import patch

import pytest

from shared.auth.models import User
from shared.auth.session_store import DEFAULT_SESSION_TTL_SECONDS, AuthSessionStore


def _user(user_id: str = "u1", username: str = "alice") -> User:
    return User(user_id=user_id, username=username, password_hash="simple$x")


class TestEstablish:
    def test_creates_session_with_correct_fields(self):
        store = AuthSessionStore()
        session = store.establish(_user())

        assert session.user_id == "u1"
        assert session.username == "alice"
        assert session.session_id
        assert session.expires_at > session.created_at

    def test_default_ttl_is_one_day(self):
        store = AuthSessionStore()
        session = store.establish(_user())

        assert store.ttl_seconds == DEFAULT_SESSION_TTL_SECONDS == 86400
        assert session.expires_at - session.created_at == pytest.approx(86400)

    def test_sessions_have_unique_ids(self):
        store = AuthSessionStore()
        s1 = store.establish(_user("u1", "alice"))
        s2 = store.establish(_user("u2", "bob"))
        assert s1.session_id != s2.session_id

    def test_same_user_can_hold_several_sessions(self):
        store = AuthSessionStore()
        s1 = store.establish(_user())
        s2 = store.establish(_user())

        assert store.resolve(s1.session_id) is not None
        assert store.resolve(s2.session_id) is not None


class TestResolve:
    def test_retrieves_valid_session(self):
        store = AuthSessionStore()
        session = store.establish(_user())

        result = store.resolve(session.session_id)
        assert result is not None
        assert result.user_id == "u1"

    def test_returns_none_for_unknown_id(self):
        store = AuthSessionStore()
        assert store.resolve("nonexistent") is None

    def test_returns_none_and_removes_expired_session(self):
        store = AuthSessionStore(ttl_seconds=60)
        session = store.establish(_user())

        with patch("shared.auth.session_store.time") as mock_time:
            mock_time.time.return_value = session.expires_at + 1
            result = store.resolve(session.session_id)

        assert result is None
        assert session.session_id not in store._sessions

    def test_expiry_is_absolute(self):
        """Resolving a session does not extend its lifetime."""
        store = AuthSessionStore(ttl_seconds=60)
        session = store.establish(_user())
        expires_at = session.expires_at

        with patch("shared.auth.session_store.time") as mock_time:
            mock_time.time.return_value = session.created_at + 30
            assert store.resolve(session.session_id) is not None
            mock_time.time.return_value = session.created_at + 61
            assert store.resolve(session.session_id) is None

        assert session.expires_at == expires_at


class TestDestroy:
    def test_removes_existing_session(self):
        store = AuthSessionStore()
        session = store.establish(_user())

        store.destroy(session.session_id)
        assert store.resolve(session.session_id) is None

    def test_ignores_unknown_session(self):
        store = AuthSessionStore()
        store.destroy("nonexistent")


class TestCleanupExpired:
    def test_removes_expired_sessions(self):
        short = AuthSessionStore(ttl_seconds=1)
        short.establish(_user("u1", "alice"))
        short.establish(_user("u2", "bob"))

        with patch("shared.auth.session_store.time") as mock_time:
            mock_time.time.return_value = time.time() + 2
            removed = short.cleanup_expired()

        assert removed == 2
        assert short._sessions == {}

    def test_keeps_active_sessions(self):
        store = AuthSessionStore(ttl_seconds=3600)
        active = store.establish(_user())

        assert store.cleanup_expired() == 0
        assert store.resolve(active.session_id) is not None


class TestCleanupLifecycle:
    async def test_start_and_stop_cleanup(self):
        store = AuthSessionStore()
        store.start_cleanup()
        assert store._cleanup_task is not None
        assert not store._cleanup_task.done()

        await store.stop_cleanup()
        assert store._cleanup_task is None

    async def test_start_is_idempotent(self):
        store = AuthSessionStore()
        store.start_cleanup()
        task1 = store._cleanup_task

        store.start_cleanup()
        task2 = store._cleanup_task

        assert task1 is task2
        await store.stop_cleanup()

    async def test_stop_without_start_is_safe(self):
        store = AuthSessionStore()
        await store.stop_cleanup()

    async def test_cleanup_loop_runs_periodically(self):
        store = AuthSessionStore()

        with patch.object(store, "cleanup_expired", wraps=store.cleanup_expired) as mock_cleanup:
            with patch("shared.auth.session_store.CLEANUP_INTERVAL_SECONDS", 0.01):
                store.start_cleanup()
                await asyncio.sleep(0.05)
                await store.stop_cleanup()

            assert mock_cleanup.call_count >= 1
