"""FastAPI application factory and entry point for ReadCircle."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from readcircle.api.routes.books import router as books_router
from readcircle.api.routes.comments import router as comments_router
from readcircle.api.routes.feed import router as feed_router
from readcircle.api.routes.posts import router as posts_router
from readcircle.config import settings
from readcircle.domain.errors import UnknownContentKindError
from readcircle.services.result import ServiceResult

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown events."""
    logger.info("%s starting up...", settings.app_name)
    logger.info("Rating scale: 0-%d", settings.rating_scale)
    logger.info("Trending window: %d days", settings.trending_window_days)
    yield
    logger.info("%s shutting down...", settings.app_name)


def _failure(message: str) -> JSONResponse:
    body = ServiceResult.failure(message).model_dump()
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title=settings.app_name,
        description="Social reading: reviews, playlists, discussions and genre recommendations",
        version="1.0.0",
        lifespan=lifespan,
    )

    # ── Middleware ──────────────────────────────────
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routes ─────────────────────────────────────
    application.include_router(books_router)
    application.include_router(posts_router)
    application.include_router(comments_router)
    application.include_router(feed_router)

    # ── Error Handlers ─────────────────────────────
    @application.exception_handler(UnknownContentKindError)
    async def unknown_kind(request: Request, exc: UnknownContentKindError) -> JSONResponse:
        logger.error("%s %s: %s", request.method, request.url.path, exc)
        return _failure("the feed contains content it cannot display")

    @application.exception_handler(SQLAlchemyError)
    async def storage_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Storage failure on %s %s", request.method, request.url.path)
        return _failure("storage is unavailable, please retry later")

    # ── Health Check ───────────────────────────────
    @application.get("/health", tags=["System"])
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "readcircle"}

    return application


app = create_app()
