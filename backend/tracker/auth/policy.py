"""Route auth policies, checked fail-closed at startup.

Every endpoint is wrapped in exactly one of ``public_route``,
``protected_html`` or ``protected_api``. The wrapper records its policy in
``AUTH_POLICY_ATTR`` so ``validate_route_auth_policy`` can refuse to build an
app that has an unclassified route.

Anonymous requests are handled per policy:

- ``protected_html``: 303 redirect to the landing page, which shows the login
  form. Used where a browser navigates or a page script can follow redirects.
- ``protected_api``: ``HTTPException(401)``; the app's exception handler
  turns it into the JSON error envelope.
"""

from __future__ import annotations

import functools
import inspect
from enum import StrEnum
from http import HTTPStatus
from typing import TYPE_CHECKING

from starlette.authentication import has_required_scope
from starlette.exceptions import HTTPException
from starlette.responses import RedirectResponse, Response
from starlette.routing import Route

if TYPE_CHECKING:
    import re
    from collections.abc import Callable
    from typing import Any

    from starlette.requests import Request
    from starlette.routing import BaseRoute

AUTH_POLICY_ATTR = "__auth_policy__"

# Relative, so a forged Host header cannot turn the redirect into an open redirect.
LANDING_PATH = "/"


class AuthPolicy(StrEnum):
    PUBLIC = "public"
    PROTECTED_HTML = "protected_html"
    PROTECTED_API = "protected_api"


def _redirect_to_landing() -> Response:
    return RedirectResponse(LANDING_PATH, status_code=HTTPStatus.SEE_OTHER)


def _reject_api_call() -> Response:
    raise HTTPException(status_code=HTTPStatus.UNAUTHORIZED)


def _with_policy(
    endpoint: Callable[..., Any],
    policy: AuthPolicy,
    on_anonymous: Callable[[], Response] | None,
) -> Callable[..., Any]:
    """Wrap ``endpoint`` (sync or async) and tag the wrapper with ``policy``.

    ``on_anonymous`` is None for public routes; otherwise it produces (or
    raises) the response for a request without the ``authenticated`` scope.
    """

    def denied(request: Request) -> bool:
        return on_anonymous is not None and not has_required_scope(request, ["authenticated"])

    if inspect.iscoroutinefunction(endpoint):

        @functools.wraps(endpoint)
        async def async_wrapper(request: Request) -> Response:
            if denied(request):
                return on_anonymous()
            return await endpoint(request)

        wrapper = async_wrapper
    else:

        @functools.wraps(endpoint)
        def sync_wrapper(request: Request) -> Response:
            if denied(request):
                return on_anonymous()
            return endpoint(request)

        wrapper = sync_wrapper

    setattr(wrapper, AUTH_POLICY_ATTR, policy)
    return wrapper


def protected_html(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Require a session; send anonymous requests back to the landing page."""
    return _with_policy(endpoint, AuthPolicy.PROTECTED_HTML, _redirect_to_landing)


def protected_api(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Require a session; reject anonymous requests with 401."""
    return _with_policy(endpoint, AuthPolicy.PROTECTED_API, _reject_api_call)


def public_route(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Mark an endpoint as deliberately public.

    The marker goes on a thin wrapper, never on the original callable.
    """
    return _with_policy(endpoint, AuthPolicy.PUBLIC, None)


def collect_protected_api_patterns(routes: list[BaseRoute]) -> list[re.Pattern[str]]:
    """Return the compiled path patterns of routes marked ``protected_api``."""
    return [
        route.path_regex
        for route in routes
        if isinstance(route, Route) and getattr(route.endpoint, AUTH_POLICY_ATTR, None) == AuthPolicy.PROTECTED_API
    ]


def validate_route_auth_policy(routes: list[BaseRoute]) -> None:
    """Raise RuntimeError naming every Route without a policy. Mounts carry none and are skipped."""
    unclassified = [
        f"{route.path} ({route.name or getattr(route.endpoint, '__name__', 'unknown')})"
        for route in routes
        if isinstance(route, Route) and not hasattr(route.endpoint, AUTH_POLICY_ATTR)
    ]
    if unclassified:
        msg = f"Unclassified routes missing auth policy: {', '.join(unclassified)}"
        raise RuntimeError(msg)
