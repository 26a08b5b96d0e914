"""
FastAPI application factory.

``create_app()`` assembles the application with logging, CORS, rate
limiting, error handlers and the ``/api`` routers. The module-level
``app`` instance allows ``uvicorn src.api.app:app --reload --port 5000``.
"""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware.error_handler import register_error_handlers
from src.api.middleware.rate_limit import FixedWindowRateLimiter, RateLimitMiddleware
from src.api.routes import business, health
from src.core.config import get_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level.upper(),
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    root.setLevel(level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info("CraftConnect backend started (environment=%s)", settings.environment)
    logger.info("API available at http://localhost:%d/api", settings.app_port)
    logger.info("Google Cloud project: %s", settings.google_project_id or "NOT_SET")
    if not settings.google_project_id:
        logger.warning("GOOGLE_PROJECT_ID not set in environment variables")
    if not settings.google_application_credentials:
        logger.warning("GOOGLE_APPLICATION_CREDENTIALS not set in environment variables")
    yield
    logger.info("CraftConnect backend shutting down")


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="CraftConnect",
        description="Voice-memo business analysis for artisans: speech-to-text, "
        "Gemini analysis and WhatsApp copywriting.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.started_at = time.monotonic()

    # -- Request log --
    @app.middleware("http")
    async def log_api_requests(request: Request, call_next) -> Response:
        if request.url.path.startswith("/api/"):
            logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    # -- Rate limiting (process-wide counters keyed by client address) --
    app.state.rate_limiter = FixedWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(RateLimitMiddleware, limiter=app.state.rate_limiter)

    # -- CORS (outermost, so preflights and 429s carry the headers) --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- REST routes --
    app.include_router(health.router, prefix="/api")
    app.include_router(business.router, prefix="/api")

    return app


app = create_app()
