"""
Global error handling for the FastAPI application.

Catches CraftConnectError subclasses, request validation errors, routing
errors and unhandled exceptions, converting them into the
``{"success": false, "error": ...}`` envelope. Server-side failures are
logged in full; clients only get details outside production.
"""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.config import get_settings
from src.core.exceptions import CraftConnectError

logger = logging.getLogger(__name__)


def error_envelope(exc: CraftConnectError) -> dict:
    """Build the client-facing body for a domain error.

    4xx/503 errors carry their ``details``; other 5xx errors only expose
    the underlying message while running in development.
    """
    content: dict = {"success": False, "error": exc.error}
    if exc.status_code < 500 or exc.status_code == 503:
        if exc.detail:
            content["details"] = exc.detail
        content["code"] = exc.code
    elif get_settings().is_development and exc.detail:
        content["message"] = exc.detail
    return content


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers four handlers:
    1. ``CraftConnectError`` — domain errors with their own status code.
    2. ``RequestValidationError`` — malformed bodies/params become 400.
    3. ``StarletteHTTPException`` — 404 "Route not found" and other routing errors.
    4. ``Exception`` — catch-all for unexpected server errors (500).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(CraftConnectError)
    async def craftconnect_error_handler(request: Request, exc: CraftConnectError) -> JSONResponse:
        """Convert domain-specific errors into a JSON error envelope."""
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed [%s]: %s",
                request.method,
                request.url.path,
                exc.code,
                exc,
                exc_info=exc.__cause__ or exc,
            )
        else:
            logger.warning("%s %s rejected [%s]: %s", request.method, request.url.path, exc.code, exc)
        return JSONResponse(status_code=exc.status_code, content=error_envelope(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request validation errors (malformed body/params)."""
        logger.warning("%s %s invalid request: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": "Invalid request",
                "details": str(exc),
                "code": "VALIDATION_ERROR",
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Unknown routes and other framework-raised HTTP errors."""
        if exc.status_code == 404:
            content = {"success": False, "error": "Route not found", "path": request.url.path}
        else:
            content = {"success": False, "error": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler — stack traces only leave the server in development."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        content: dict = {"success": False, "error": "Internal server error"}
        if get_settings().is_development:
            content["message"] = str(exc)
            content["stack"] = "".join(traceback.format_exception(exc))
        else:
            content["message"] = "Something went wrong"
        return JSONResponse(status_code=500, content=content)
