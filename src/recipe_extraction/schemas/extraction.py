"""Request and response schemas for the social recipe endpoints."""

from __future__ import annotations

from typing import Self

from pydantic import ConfigDict, Field, model_validator

from recipe_extraction.schemas.base import APIRequest, APIResponse
from recipe_extraction.schemas.recipe import CanonicalRecipe, ScreenshotCandidate


class ExtractionRequest(APIRequest):
    """A request to extract a recipe from a social-media post."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(
        ...,
        min_length=1,
        max_length=2048,
        description="Post URL",
        examples=["https://youtu.be/dQw4w9WgXcQ"],
    )
    platform: str | None = Field(
        default=None,
        max_length=32,
        description=(
            "Platform the caller believes the URL belongs to; unsupported "
            "names are rejected with INVALID_URL"
        ),
        examples=["youtube"],
    )
    requester_id: int = Field(..., gt=0, description="Requesting user ID")
    capture_screenshot_options: bool = Field(
        default=False,
        description="Return every captured video frame as a thumbnail option",
    )


class ParseRecipeResponse(APIResponse):
    """Extracted recipe returned for review before import."""

    success: bool = True
    recipe: CanonicalRecipe
    screenshot_options: list[ScreenshotCandidate] = Field(default_factory=list)
    is_synthetic: bool = Field(
        ..., description="True when the recipe body is placeholder data"
    )


class ImportRecipeRequest(APIRequest):
    """Import a reviewed recipe, or extract and import in one call."""

    url: str | None = Field(default=None, max_length=2048)
    platform: str | None = Field(default=None, max_length=32)
    requester_id: int = Field(..., gt=0)
    recipe: CanonicalRecipe | None = Field(
        default=None, description="Reviewed recipe from a previous parse"
    )

    @model_validator(mode="after")
    def _require_url_or_recipe(self) -> Self:
        if self.recipe is None and not self.url:
            msg = "Either url or recipe is required"
            raise ValueError(msg)
        return self


class ImportRecipeResponse(APIResponse):
    """Result of persisting a recipe."""

    success: bool = True
    recipe_id: str
    recipe: CanonicalRecipe
    is_synthetic: bool
