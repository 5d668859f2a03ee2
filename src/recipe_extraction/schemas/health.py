"""Health check schemas."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field

from recipe_extraction.schemas.base import APIResponse
from recipe_extraction.schemas.enums import HealthStatus


class HealthResponse(APIResponse):
    """Liveness response."""

    status: HealthStatus = Field(..., description="Health status")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Current server timestamp",
    )
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")


class ReadinessResponse(HealthResponse):
    """Readiness response with dependency status."""

    browser_started: bool = Field(
        ..., description="Whether the shared browser has been launched"
    )
    providers: list[str] = Field(
        default_factory=list, description="Configured AI providers in call order"
    )
    dependencies: dict[str, str] = Field(
        default_factory=dict, description="Status of each service component"
    )
