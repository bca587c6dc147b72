"""``request.user`` for signed-in requests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.authentication import BaseUser

if TYPE_CHECKING:
    from shared.auth.models import AuthSession


class AuthenticatedUser(BaseUser):
    """Read-only view of the session that authenticated the request."""

    def __init__(self, session: AuthSession) -> None:
        self._session = session

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return self._session.username

    @property
    def identity(self) -> str:
        return self._session.user_id

    @property
    def user_id(self) -> str:
        return self._session.user_id

    @property
    def username(self) -> str:
        return self._session.username

    @property
    def session_id(self) -> str:
        return self._session.session_id
