"""Integration tests for the Prometheus metrics endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient

from recipe_extraction.core.config.settings import MetricsSettings, ObservabilitySettings
from recipe_extraction.factory import create_app


if TYPE_CHECKING:
    from recipe_extraction.core.config import Settings


pytestmark = pytest.mark.integration


class TestMetricsEndpoint:
    """Tests for GET /metrics."""

    async def test_exposes_extraction_counters(self, test_settings: Settings) -> None:
        """Should expose HTTP and extraction metrics when enabled."""
        settings = test_settings.model_copy(
            update={
                "observability": ObservabilitySettings(
                    metrics=MetricsSettings(enabled=True)
                )
            }
        )
        app = create_app(settings)

        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            response = await client.get("/api/v1/recipe-extraction/metrics")

        assert response.status_code == 200
        body = response.text
        assert "recipe_extraction_extractions_total" in body
        assert "recipe_extraction_provider_attempts_total" in body
        assert "recipe_extraction_thumbnail_resolutions_total" in body

    async def test_disabled_metrics_are_not_exposed(
        self, test_settings: Settings
    ) -> None:
        """Should not mount the endpoint when metrics are disabled."""
        app = create_app(test_settings)

        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            response = await client.get("/api/v1/recipe-extraction/metrics")

        assert response.status_code == 404
