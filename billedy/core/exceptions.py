import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from billedy.web.templating import templates

logger = structlog.get_logger()

API_PREFIXES = ("/api/", "/health")


class AppError(Exception):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


def _wants_html(request: Request) -> bool:
    return not request.url.path.startswith(API_PREFIXES)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("app_error", path=request.url.path, status=exc.status_code, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        cleaned = {k: v for k, v in error.items() if k not in ("url", "ctx", "input")}
        errors.append(cleaned)
    return JSONResponse(status_code=422, content={"detail": errors})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == 404 and _wants_html(request):
        return templates.TemplateResponse(request, "not_found.html", status_code=404)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    logger.error("unhandled_error", path=request.url.path, method=request.method, error=repr(exc), exc_info=exc)
    if _wants_html(request):
        return templates.TemplateResponse(
            request, "error.html", {"retry_path": request.url.path}, status_code=500
        )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
