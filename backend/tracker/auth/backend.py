"""Starlette AuthenticationBackend that validates signed session cookies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.authentication import AuthCredentials, AuthenticationBackend

from shared.auth.session_token import unsign_session_id
from tracker.auth.models import AuthenticatedUser

if TYPE_CHECKING:
    from starlette.requests import HTTPConnection

    from shared.auth.service import AuthService

SESSION_COOKIE_NAME = "session_id"


class SessionCookieBackend(AuthenticationBackend):
    """Resolve the ``session_id`` cookie to an authenticated user.

    A missing, tampered, unknown, or expired cookie leaves the request
    anonymous; route policies decide whether that means a redirect or a 401.
    """

    def __init__(self, auth_service: AuthService, session_secret: str) -> None:
        self._auth_service = auth_service
        self._session_secret = session_secret

    async def authenticate(
        self,
        conn: HTTPConnection,
    ) -> tuple[AuthCredentials, AuthenticatedUser] | None:
        cookie = conn.cookies.get(SESSION_COOKIE_NAME)
        if not cookie:
            return None
        session_id = unsign_session_id(cookie, self._session_secret)
        session = self._auth_service.validate_session(session_id)
        if session is None:
            return None
        return AuthCredentials(["authenticated"]), AuthenticatedUser(session)
