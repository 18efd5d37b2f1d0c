import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from billedy.api.router import router
from billedy.config import settings
from billedy.core.exceptions import register_exception_handlers
from billedy.core.logging import configure_logging
from billedy.web.templating import STATIC_DIR

configure_logging(settings.log_level, json=settings.log_json)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if not settings.cloudinary_cloud_name:
        logger.warning("cloudinary_not_configured")
    logger.info("app_started", app=settings.app_name, debug=settings.debug)
    yield
    logger.info("app_stopped", app=settings.app_name)


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

app.add_middleware(SessionMiddleware, secret_key=settings.session_secret, same_site="lax")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next) -> Response:
    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "request_completed",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return response


register_exception_handlers(app)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
app.include_router(router)


def run() -> None:
    import uvicorn

    uvicorn.run("billedy.main:app", host=settings.host, port=settings.port, reload=settings.debug)
