from urllib.parse import urlparse

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from billedy.web import components  # noqa: F401  registers template helpers
from billedy.web.sections import SECTIONS, get_section
from billedy.web.templating import THEME_COOKIE, THEMES, flash, templates

logger = structlog.get_logger()

router = APIRouter()

THEME_COOKIE_MAX_AGE = 365 * 24 * 60 * 60


def _safe_next(next_path: str | None) -> str:
    if not next_path:
        return "/dashboard"
    parsed = urlparse(next_path)
    if parsed.scheme or parsed.netloc or not next_path.startswith("/") or next_path.startswith("//"):
        return "/dashboard"
    return next_path


@router.get("/", include_in_schema=False)
async def index() -> RedirectResponse:
    return RedirectResponse(url="/dashboard", status_code=307)


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "dashboard/index.html", {"sections": SECTIONS})


@router.get("/dashboard/{slug}", response_class=HTMLResponse)
async def dashboard_section(request: Request, slug: str) -> HTMLResponse:
    section = get_section(slug)
    if section is None:
        raise HTTPException(status_code=404)
    return templates.TemplateResponse(request, "dashboard/section.html", {"section": section})


@router.get("/theme/{mode}", include_in_schema=False)
async def set_theme(
    request: Request,
    mode: str,
    next_path: str | None = Query(None, alias="next"),
) -> RedirectResponse:
    if mode not in THEMES:
        raise HTTPException(status_code=404)
    flash(request, f"Theme set to {mode}", "success")
    response = RedirectResponse(url=_safe_next(next_path), status_code=303)
    response.set_cookie(THEME_COOKIE, mode, max_age=THEME_COOKIE_MAX_AGE, samesite="lax")
    logger.info("theme_changed", theme=mode)
    return response
