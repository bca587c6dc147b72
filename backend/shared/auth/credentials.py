"""Credential store: create, find, and verify user accounts."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

from shared.auth.models import User

if TYPE_CHECKING:
    from shared.auth.password import PasswordHasher
    from shared.dal.user_repository import UserRepository


class CredentialStore:
    """Hash passwords and persist user identities through a UserRepository.

    Plaintext passwords never leave this class; only the salted hash is stored.
    """

    def __init__(self, user_repo: UserRepository, *, password_hasher: PasswordHasher) -> None:
        self._user_repo = user_repo
        self._hasher = password_hasher

    async def create_user(self, username: str, password: str) -> str:
        """Create an account and return its user id.

        Raises DuplicateUsernameError if the username already exists.
        """
        user = User(
            user_id=uuid4().hex,
            username=username,
            password_hash=await self._hasher.hash(password),
        )
        await self._user_repo.create_user(user)
        return user.user_id

    async def find_user(self, username: str) -> User | None:
        return await self._user_repo.get_by_username(username)

    async def verify_user(self, username: str, password: str) -> User | None:
        """Return the user when the password matches.

        Returns None both for an unknown username and for a wrong password;
        this call alone does not tell the two apart.
        """
        user = await self.find_user(username)
        if user is None:
            return None
        if not await self._hasher.verify(password, user.password_hash):
            return None
        return user
