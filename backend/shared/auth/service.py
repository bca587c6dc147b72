"""Auth service: login-or-register on demand, plus session validation and logout."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from shared.auth.password import PASSWORD_MAX_BYTES
from shared.dal.user_repository import DuplicateUsernameError

if TYPE_CHECKING:
    from shared.auth.credentials import CredentialStore
    from shared.auth.models import AuthSession, User
    from shared.auth.session_store import AuthSessionStore

logger = structlog.get_logger()


class AuthError(Exception):
    """Credentials were rejected."""

class LoginValidationError(ValueError):
    """Login input is missing or malformed."""

@dataclass(frozen=True)
class LoginResult:
    session: AuthSession
    new_account: bool = False

class AuthService:
    """Coordinate the login flow on top of the credential and session stores.

    A login attempt starts Anonymous and ends either Authenticated (a session
    is returned) or Rejected (AuthError is raised):

    1. If the password verifies, the caller is Authenticated.
    2. Otherwise, if the username exists, the caller is Rejected.
    3. Otherwise the account is created on the spot and the caller is
       Authenticated with ``new_account=True``. There is no separate
       registration step: any unseen username becomes an account on first use.
    """

    def __init__(self, credentials: CredentialStore, session_store: AuthSessionStore) -> None:
        self._credentials = credentials
        self._session_store = session_store

    async def login(self, username: str, password: str) -> LoginResult:
        _validate_login_input(username, password)

        user = await self._credentials.verify_user(username, password)
        if user is not None:
            logger.info("login succeeded", username=username)
            return LoginResult(session=self._session_store.establish(user))

        if await self._credentials.find_user(username) is not None:
            logger.info("login rejected: invalid password", username=username)
            raise AuthError("Invalid password")

        user = await self._provision(username, password)
        logger.info("created account on first login", username=username, user_id=user.user_id)
        return LoginResult(session=self._session_store.establish(user), new_account=True)

    def validate_session(self, session_id: str | None) -> AuthSession | None:
        """Return the session if valid and not expired, otherwise None."""
        if session_id is None:
            return None
        return self._session_store.resolve(session_id)

    def logout(self, session_id: str) -> None:
        self._session_store.destroy(session_id)

    async def _provision(self, username: str, password: str) -> User:
        try:
            await self._credentials.create_user(username, password)
        except DuplicateUsernameError:
            # A concurrent login created the account between our lookup and insert.
            user = await self._credentials.verify_user(username, password)
            if user is None:
                raise AuthError("Invalid password") from None
            return user

        user = await self._credentials.find_user(username)
        if user is None:  # pragma: no cover - the repository just stored it
            raise RuntimeError(f"User '{username}' vanished right after creation")
        return user

def _validate_login_input(username: str, password: str) -> None:
    if not username or not password:
        raise LoginValidationError("Username and password required")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise LoginValidationError(f"Password must not exceed {PASSWORD_MAX_BYTES} bytes when encoded")
