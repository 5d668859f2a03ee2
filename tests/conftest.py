"""Shared test fixtures and configuration for the recipe extraction tests.

Every test runs with ``APP_ENV=test`` so the YAML layer loads
``config/environments/test`` (metrics off, frame capture off, no retries),
and without provider keys so nothing reaches a real AI API by accident.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from recipe_extraction.core.config import get_settings
from recipe_extraction.schemas.enums import Platform, RecipeQuality
from recipe_extraction.schemas.recipe import (
    CanonicalRecipe,
    RecipeIngredient,
    RecipeInstruction,
)
from recipe_extraction.services.platforms.models import PlatformMatch, UrlShape


if TYPE_CHECKING:
    from collections.abc import Generator


os.environ["APP_ENV"] = "test"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Fresh settings per test, with provider keys removed."""
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def youtube_match() -> PlatformMatch:
    """Resolved YouTube watch URL."""
    return PlatformMatch(
        platform=Platform.YOUTUBE,
        content_id="dQw4w9WgXcQ",
        url_shape=UrlShape.WATCH,
        source_url="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
    )


@pytest.fixture
def tiktok_match() -> PlatformMatch:
    """Resolved TikTok video URL."""
    return PlatformMatch(
        platform=Platform.TIKTOK,
        content_id="7234567890123456789",
        secondary_id="chef.jo",
        url_shape=UrlShape.VIDEO,
        source_url="https://www.tiktok.com/@chef.jo/video/7234567890123456789",
    )


@pytest.fixture
def instagram_match() -> PlatformMatch:
    """Resolved Instagram reel URL."""
    return PlatformMatch(
        platform=Platform.INSTAGRAM,
        content_id="Cx1AbC2dEfG",
        url_shape=UrlShape.REEL,
        source_url="https://www.instagram.com/reel/Cx1AbC2dEfG/",
    )


@pytest.fixture
def sample_recipe() -> CanonicalRecipe:
    """A complete canonical recipe."""
    return CanonicalRecipe(
        title="Garlic Butter Noodles",
        description="Quick weeknight noodles.",
        prep_time=5,
        cook_time=10,
        serving_size=2,
        ingredients=[
            RecipeIngredient(name="noodles", quantity=200, unit="g", order_index=1),
            RecipeIngredient(name="butter", quantity=2, unit="tbsp", order_index=2),
            RecipeIngredient(name="garlic", quantity=3, unit="cloves", order_index=3),
        ],
        instructions=[
            RecipeInstruction(step_number=1, description="Boil the noodles."),
            RecipeInstruction(step_number=2, description="Melt butter with garlic."),
            RecipeInstruction(step_number=3, description="Toss and serve."),
        ],
        tags={"noodles", "quick"},
        thumbnail_path="/uploads/noodles.jpg",
        source_url="https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        source_type=Platform.YOUTUBE,
        quality=RecipeQuality.COMPLETE,
    )
