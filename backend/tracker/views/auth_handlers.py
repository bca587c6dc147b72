"""Auth endpoints: JSON login (with account creation on first use) and logout."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.responses import JSONResponse, RedirectResponse, Response

from shared.auth.service import AuthError, LoginValidationError
from shared.auth.session_token import sign_session_id
from tracker.auth.backend import SESSION_COOKIE_NAME
from tracker.views.payload import read_payload

if TYPE_CHECKING:
    from starlette.requests import Request

    from shared.auth.models import AuthSession
    from shared.auth.service import AuthService
    from shared.auth.settings import AuthSettings


def _set_session_cookie(response: Response, session: AuthSession, auth_settings: AuthSettings) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=sign_session_id(session.session_id, auth_settings.session_secret),
        httponly=True,
        samesite="lax",
        secure=auth_settings.cookie_secure,
        max_age=auth_settings.session_ttl_seconds,
        path="/",
    )


async def login(request: Request) -> Response:
    """POST /api/login {username, password} - log in, creating the account if the name is new."""
    auth_service: AuthService = request.app.state.auth_service
    auth_settings: AuthSettings = request.app.state.auth_settings

    body = await read_payload(request) or {}
    username = body.get("username")
    password = body.get("password")
    if not isinstance(username, str) or not isinstance(password, str):
        return JSONResponse({"success": False, "message": "Username and password required"}, status_code=400)

    try:
        result = await auth_service.login(username, password)
    except LoginValidationError as e:
        return JSONResponse({"success": False, "message": str(e)}, status_code=400)
    except AuthError as e:
        return JSONResponse({"success": False, "message": str(e)}, status_code=401)

    # Logging in again replaces whatever session the browser held.
    if request.user.is_authenticated:
        auth_service.logout(request.user.session_id)

    if result.new_account:
        payload = {"success": True, "message": "New account created successfully", "newAccount": True}
    else:
        payload = {"success": True, "message": "Login successful"}
    response = JSONResponse(payload)
    _set_session_cookie(response, result.session, auth_settings)
    return response


async def logout(request: Request) -> Response:
    """GET /logout - destroy the session and return to the landing page."""
    auth_service: AuthService = request.app.state.auth_service
    if request.user.is_authenticated:
        auth_service.logout(request.user.session_id)
    response = RedirectResponse("/", status_code=303)
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")
    return response
