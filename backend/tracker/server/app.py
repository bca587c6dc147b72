from __future__ import annotations

import contextlib
from datetime import UTC, datetime
from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
import uvicorn
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from shared.auth import AuthService, AuthSessionStore, CredentialStore
from shared.auth.password import get_hasher
from shared.auth.settings import AuthSettings
from shared.logging import setup_logging
from shared.persistence import PersistenceBackend, select_backend
from tracker.auth.backend import SessionCookieBackend
from tracker.auth.policy import (
    collect_protected_api_patterns,
    protected_api,
    protected_html,
    public_route,
    validate_route_auth_policy,
)
from tracker.server.middleware import SecurityHeadersMiddleware, SlashNormalizationMiddleware
from tracker.server.settings import TrackerServerSettings
from tracker.views.auth_handlers import login, logout
from tracker.views.car_handlers import create_car, delete_car, list_cars, update_car
from tracker.views.page_handlers import STATIC_DIR, create_templates, index

logger = structlog.get_logger()

if TYPE_CHECKING:
    import re
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.requests import Request


def _make_auth_error_handler(
    protected_api_patterns: list[re.Pattern[str]],
) -> Callable[[Request, Exception], Awaitable[Response]]:
    """HTTPException handler: JSON envelope for 401s on protected API paths.

    Everything else keeps Starlette's stock rendering: an empty body for
    204/304 and the plain-text detail otherwise.
    """

    def is_protected_api(path: str) -> bool:
        return any(pattern.match(path) for pattern in protected_api_patterns)

    async def handle_http_error(request: Request, exc: Exception) -> Response:
        error = cast("HTTPException", exc)
        status, headers = error.status_code, error.headers
        if status == HTTPStatus.UNAUTHORIZED and is_protected_api(request.url.path):
            return JSONResponse({"success": False, "message": "Authentication required"}, status_code=status)
        if status in (HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED):
            return Response(status_code=status, headers=headers)
        return PlainTextResponse(error.detail or "", status_code=status, headers=headers)

    return handle_http_error


async def _server_error_handler(request: Request, _exc: Exception) -> Response:
    logger.exception("unhandled error", path=request.url.path, method=request.method)
    return JSONResponse({"success": False, "message": "Server error"}, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)


async def health(request: Request) -> JSONResponse:
    backend: PersistenceBackend = request.app.state.backend
    return JSONResponse(
        {
            "status": "OK",
            "persistenceMode": backend.mode.value,
            "timestamp": datetime.now(tz=UTC).isoformat(),
        },
    )


def create_app(
    settings: TrackerServerSettings | None = None,
    auth_settings: AuthSettings | None = None,
    backend: PersistenceBackend | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = TrackerServerSettings()
    if auth_settings is None:  # pragma: no cover
        auth_settings = AuthSettings()
    if backend is None:
        backend = select_backend(settings.database_path, force_demo=settings.demo_mode)

    routes = [
        # Anonymous: 303 to the landing page
        Route("/api/cars", protected_html(list_cars), methods=["GET"], name="list_cars"),
        # Anonymous: 401 JSON envelope
        Route("/api/cars", protected_api(create_car), methods=["POST"], name="create_car"),
        Route("/api/cars/{car_id}", protected_api(update_car), methods=["PUT"], name="update_car"),
        Route("/api/cars/{car_id}", protected_api(delete_car), methods=["DELETE"], name="delete_car"),
        Route("/", public_route(index), methods=["GET"], name="index"),
        Route("/health", public_route(health), methods=["GET"], name="health"),
        Route("/api/login", public_route(login), methods=["POST"], name="login"),
        Route("/logout", public_route(logout), methods=["GET"], name="logout"),
        Mount("/static", app=StaticFiles(directory=str(STATIC_DIR)), name="static"),
    ]

    validate_route_auth_policy(routes)
    protected_api_patterns = collect_protected_api_patterns(routes)

    session_store = AuthSessionStore(ttl_seconds=auth_settings.session_ttl_seconds)
    credentials = CredentialStore(backend.user_repo, password_hasher=get_hasher(auth_settings.password_hasher))
    auth_service = AuthService(credentials, session_store)

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        session_store.start_cleanup()
        yield
        await session_store.stop_cleanup()
        backend.close()

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers={
            HTTPException: _make_auth_error_handler(protected_api_patterns),
            Exception: _server_error_handler,
        },
    )
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    app.add_middleware(
        AuthenticationMiddleware,  # type: ignore[arg-type]
        backend=SessionCookieBackend(auth_service, auth_settings.session_secret),
    )
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
        allow_credentials=True,
    )
    app.add_middleware(SecurityHeadersMiddleware)  # type: ignore[arg-type]

    app.state.settings = settings
    app.state.auth_settings = auth_settings
    app.state.backend = backend
    app.state.session_store = session_store
    app.state.auth_service = auth_service
    app.state.templates = create_templates()

    logger.info("tracker server ready", mode=backend.mode.value)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory tracker.server.app:get_app."""
    s = TrackerServerSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s, auth_settings=AuthSettings())


def run() -> None:  # pragma: no cover
    settings = TrackerServerSettings()
    logger.info("starting tracker server", host=settings.host, port=settings.port)
    uvicorn.run("tracker.server.app:get_app", factory=True, host=settings.host, port=settings.port)
