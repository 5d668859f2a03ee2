"""Health check endpoints.

Liveness and readiness probes for container orchestration.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from recipe_extraction.api.dependencies import get_browser, get_extraction_gateway
from recipe_extraction.core.config import Settings, get_settings
from recipe_extraction.schemas.enums import HealthStatus
from recipe_extraction.schemas.health import HealthResponse, ReadinessResponse
from recipe_extraction.services.browser.manager import BrowserManager  # noqa: TC001
from recipe_extraction.services.extraction.gateway import (  # noqa: TC001
    RecipeExtractionGateway,
)


router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Basic health check to verify the service is running.",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Check if the service is alive; no dependencies are checked."""
    return HealthResponse(
        status=HealthStatus.HEALTHY,
        version=settings.app.version,
        environment=settings.APP_ENV,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Reports which extraction components are available.",
)
async def readiness_check(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    browser: Annotated[BrowserManager | None, Depends(get_browser)],
    gateway: Annotated[RecipeExtractionGateway | None, Depends(get_extraction_gateway)],
) -> ReadinessResponse:
    """Check if the service can handle extraction requests.

    The browser launches lazily, so "idle" is a ready state. Without AI
    providers the service still answers, but only with template recipes.
    """
    state = request.app.state
    dependencies = {
        "pipeline": "healthy" if getattr(state, "pipeline", None) else "unavailable",
        "browser": (
            "unavailable"
            if browser is None
            else "started" if browser.is_started else "idle"
        ),
        "ai_providers": (
            "healthy"
            if gateway is not None and gateway.is_configured
            else "not_configured"
        ),
        "persistence": (
            "healthy"
            if getattr(state, "recipe_repository", None) is not None
            else "not_configured"
        ),
    }

    if dependencies["pipeline"] == "unavailable":
        status = HealthStatus.UNHEALTHY
    elif dependencies["ai_providers"] == "not_configured":
        status = HealthStatus.DEGRADED
    else:
        status = HealthStatus.HEALTHY

    return ReadinessResponse(
        status=status,
        version=settings.app.version,
        environment=settings.APP_ENV,
        browser_started=browser is not None and browser.is_started,
        providers=gateway.providers if gateway is not None else [],
        dependencies=dependencies,
    )
