"""
Template environment and layout helpers shared by every HTML page.
"""
from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates

from billedy.config import settings

PACKAGE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"

THEMES = ("light", "dark", "system")
THEME_COOKIE = "theme"
TOAST_LEVELS = ("info", "success", "warning", "error")
_TOASTS_KEY = "toasts"

FONT_VARIABLES = {
    "--font-geist-sans": "'Geist', ui-sans-serif, system-ui, sans-serif",
    "--font-geist-mono": "'Geist Mono', ui-monospace, monospace",
}

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def current_theme(request: Request) -> str:
    theme = request.cookies.get(THEME_COOKIE, settings.default_theme)
    return theme if theme in THEMES else settings.default_theme


def flash(request: Request, message: str, level: str = "info") -> None:
    """Queue a toast notification for the next rendered page."""
    if level not in TOAST_LEVELS:
        level = "info"
    toasts = list(request.session.get(_TOASTS_KEY, []))
    toasts.append({"message": message, "level": level})
    request.session[_TOASTS_KEY] = toasts


def pop_toasts(request: Request) -> list[dict[str, str]]:
    if "session" not in request.scope:
        return []
    return request.session.pop(_TOASTS_KEY, [])


def layout_context(request: Request) -> dict[str, Any]:
    return {
        "app_name": settings.app_name,
        "html_lang": settings.html_lang,
        "theme": current_theme(request),
        "font_variables": FONT_VARIABLES,
    }


templates.env.globals["pop_toasts"] = pop_toasts
templates.env.globals["layout_context"] = layout_context
