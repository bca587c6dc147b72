"""Login sessions, held in process memory.

A session lives for a fixed TTL counted from login; activity does not extend
it. Restarting the server signs everyone out.
"""

from __future__ import annotations

import asyncio
import contextlib
import secrets
import time
from typing import TYPE_CHECKING

import structlog

from shared.auth.models import AuthSession

if TYPE_CHECKING:
    from shared.auth.models import User

DEFAULT_SESSION_TTL_SECONDS = 24 * 60 * 60
CLEANUP_INTERVAL_SECONDS = 5 * 60

SESSION_ID_BYTES = 32

logger = structlog.get_logger()


def _expired(session: AuthSession, now: float) -> bool:
    return now > session.expires_at


class AuthSessionStore:
    """Session id -> ``AuthSession``.

    Expired entries are dropped lazily by ``resolve`` and in bulk by a
    background sweep started with ``start_cleanup()``.
    """

    def __init__(self, ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS) -> None:
        self._ttl_seconds = ttl_seconds
        self._sessions: dict[str, AuthSession] = {}
        self._cleanup_task: asyncio.Task[None] | None = None

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def establish(self, user: User) -> AuthSession:
        issued = time.time()
        session = AuthSession(
            session_id=secrets.token_urlsafe(SESSION_ID_BYTES),
            user_id=user.user_id,
            username=user.username,
            created_at=issued,
            expires_at=issued + self._ttl_seconds,
        )
        self._sessions[session.session_id] = session
        return session

    def resolve(self, session_id: str) -> AuthSession | None:
        """Look up a live session. An expired one is evicted and reported as missing."""
        session = self._sessions.get(session_id)
        if session is not None and _expired(session, time.time()):
            del self._sessions[session_id]
            session = None
        return session

    def destroy(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def cleanup_expired(self) -> int:
        now = time.time()
        stale = [sid for sid, session in self._sessions.items() if _expired(session, now)]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.info("expired sessions removed", count=len(stale), remaining=len(self._sessions))
        return len(stale)

    def start_cleanup(self) -> None:
        """Launch the background sweep; a no-op while one is already running."""
        if self._cleanup_task is None or self._cleanup_task.done():
            self._cleanup_task = asyncio.create_task(self._sweep_forever())

    async def stop_cleanup(self) -> None:
        task, self._cleanup_task = self._cleanup_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(CLEANUP_INTERVAL_SECONDS)
            self.cleanup_expired()
