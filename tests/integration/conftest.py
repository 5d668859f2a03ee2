"""Integration test fixtures.

Builds the real application with test settings and runs its lifespan, so
every service on ``app.state`` is the production wiring. Only the network
edges are replaced: tests swap the pipeline's acquirer and gateway for
fakes instead of reaching YouTube, TikTok or an AI provider.
"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from prometheus_client import REGISTRY

from recipe_extraction.core.config import Settings, get_settings
from recipe_extraction.core.config.settings import (
    AppSettings,
    LoggingSettings,
    MetricsSettings,
    ObservabilitySettings,
    ThumbnailSettings,
)
from recipe_extraction.core.events.lifespan import lifespan
from recipe_extraction.factory import create_app
from tests.fixtures.fakes import InMemoryRecipeRepository


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator
    from pathlib import Path

    from fastapi import FastAPI


pytestmark = pytest.mark.integration


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Create test settings with uploads in a temp directory."""
    return Settings(
        APP_ENV="test",
        app=AppSettings(
            name="test-app",
            version="0.0.1-test",
            debug=True,
        ),
        logging=LoggingSettings(
            level="DEBUG",
            format="text",
        ),
        observability=ObservabilitySettings(metrics=MetricsSettings(enabled=False)),
        thumbnails=ThumbnailSettings(
            uploads_root=str(tmp_path / "uploads"),
            capture_enabled=False,
        ),
    )


@pytest.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI]:
    """Create the app with test settings and run its lifespan."""
    application = create_app(test_settings)
    application.dependency_overrides[get_settings] = lambda: test_settings
    async with lifespan(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def repository(app: FastAPI) -> InMemoryRecipeRepository:
    """Install an in-memory recipe repository."""
    repo = InMemoryRecipeRepository()
    app.state.recipe_repository = repo
    return repo


@pytest.fixture(autouse=True)
def reset_prometheus_registry() -> Generator[None]:
    """Reset Prometheus registry between tests.

    Prevents 'Duplicated timeseries' errors when several tests create an
    app with metrics enabled.
    """
    collectors_before = set(REGISTRY._names_to_collectors.keys())

    yield

    collectors_to_remove = []
    for name, collector in list(REGISTRY._names_to_collectors.items()):
        if name not in collectors_before:
            collectors_to_remove.append(collector)

    for collector in collectors_to_remove:
        with contextlib.suppress(Exception):
            REGISTRY.unregister(collector)
