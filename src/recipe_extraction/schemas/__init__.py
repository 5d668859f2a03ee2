"""Pydantic schemas shared by the pipeline and the API."""

from recipe_extraction.schemas.base import (
    APIRequest,
    APIResponse,
    DownstreamRequest,
    DownstreamResponse,
)
from recipe_extraction.schemas.enums import (
    Difficulty,
    HealthStatus,
    Platform,
    RecipeQuality,
)
from recipe_extraction.schemas.extraction import (
    ExtractionRequest,
    ImportRecipeRequest,
    ImportRecipeResponse,
    ParseRecipeResponse,
)
from recipe_extraction.schemas.health import HealthResponse, ReadinessResponse
from recipe_extraction.schemas.recipe import (
    CanonicalRecipe,
    RecipeIngredient,
    RecipeInstruction,
    ScreenshotCandidate,
)


__all__ = [
    "APIRequest",
    "APIResponse",
    "CanonicalRecipe",
    "Difficulty",
    "DownstreamRequest",
    "DownstreamResponse",
    "ExtractionRequest",
    "HealthResponse",
    "HealthStatus",
    "ImportRecipeRequest",
    "ImportRecipeResponse",
    "ParseRecipeResponse",
    "Platform",
    "ReadinessResponse",
    "RecipeIngredient",
    "RecipeInstruction",
    "RecipeQuality",
    "ScreenshotCandidate",
]
