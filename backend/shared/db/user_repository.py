"""SQLite-backed user repository."""

from __future__ import annotations

import asyncio
import sqlite3
from typing import TYPE_CHECKING

from shared.auth.models import User
from shared.dal.user_repository import DuplicateUsernameError, UserRepository

if TYPE_CHECKING:
    from shared.db.connection import Database


class SqliteUserRepository(UserRepository):
    """SQLite implementation of UserRepository.

    Uses a single INSERT under an asyncio lock and relies on the unique
    username index, mapping IntegrityError to DuplicateUsernameError.
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        self._lock = asyncio.Lock()

    async def create_user(self, user: User) -> None:
        async with self._lock:
            try:
                self._db.connection.execute(
                    "INSERT INTO users (id, username, data) VALUES (?, ?, ?)",
                    (user.user_id, user.username, user.model_dump_json()),
                )
                self._db.connection.commit()
            except sqlite3.IntegrityError as exc:
                self._db.connection.rollback()
                error_msg = str(exc).lower()
                if "users.username" in error_msg or "idx_users_username" in error_msg:
                    raise DuplicateUsernameError(user.username) from exc
                raise ValueError(f"User with id '{user.user_id}' already exists") from exc

    async def get_by_username(self, username: str) -> User | None:
        """Look up a user by exact (case-sensitive) username."""
        row = self._db.connection.execute(
            "SELECT data FROM users WHERE username = ?",
            (username,),
        ).fetchone()
        if row is None:
            return None
        return User.model_validate_json(row[0])
