"""HTML pages: the login form for visitors and the dashboard for signed-in users."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from starlette.templating import Jinja2Templates

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"


def create_templates() -> Jinja2Templates:
    """Create Jinja2 template engine for tracker HTML templates."""
    return Jinja2Templates(directory=str(TEMPLATES_DIR))


async def index(request: Request) -> Response:
    """GET / - dashboard when signed in, login page otherwise."""
    templates: Jinja2Templates = request.app.state.templates
    if request.user.is_authenticated:
        return templates.TemplateResponse(request, "dashboard.html", {"username": request.user.username})
    return templates.TemplateResponse(request, "login.html", {})
