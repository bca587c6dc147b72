"""Abstract interface for user persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.auth.models import User


class DuplicateUsernameError(ValueError):
    """A user with this username already exists."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Username '{username}' already taken")
        self.username = username


class UserRepository(ABC):
    """Abstract interface for user persistence.

    Implementations: SQLite (durable) and in-memory (demo fallback).
    """

    @abstractmethod
    async def create_user(self, user: User) -> None:
        """Insert a user. Raises DuplicateUsernameError when the username is taken."""

    @abstractmethod
    async def get_by_username(self, username: str) -> User | None: ...
