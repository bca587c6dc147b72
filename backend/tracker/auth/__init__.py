"""Tracker authentication: Starlette backend, user model, and route policy."""

from tracker.auth.backend import SESSION_COOKIE_NAME, SessionCookieBackend
from tracker.auth.models import AuthenticatedUser
from tracker.auth.policy import protected_api, protected_html, public_route, validate_route_auth_policy

__all__ = [
    "SESSION_COOKIE_NAME",
    "AuthenticatedUser",
    "SessionCookieBackend",
    "protected_api",
    "protected_html",
    "public_route",
    "validate_route_auth_policy",
]
