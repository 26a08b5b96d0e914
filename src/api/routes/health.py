"""Liveness and configuration diagnostics."""

import logging
import time
from datetime import UTC, datetime

from fastapi import APIRouter, Request

from src.core.config import Settings, get_settings
from src.core.models import HealthResponse, HealthServices

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


def configured_services(settings: Settings) -> HealthServices:
    """Which Google services have credentials configured (no network calls)."""
    has_credentials = bool(settings.google_application_credentials)
    return HealthServices(
        speech=has_credentials,
        vertexai=bool(settings.google_project_id),
        vision=has_credentials,
    )


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    settings = get_settings()
    started_at = getattr(request.app.state, "started_at", time.monotonic())
    body = HealthResponse(
        timestamp=datetime.now(UTC),
        uptime=round(time.monotonic() - started_at, 3),
        environment=settings.environment,
        services=configured_services(settings),
    )
    logger.debug("Health check requested: %s", body.model_dump(mode="json"))
    return body
