"""Canonical recipe schema produced by the extraction pipeline.

This is the only pipeline entity that leaves the service: it is returned to
API clients and handed to the persistence collaborator. Validation enforces
the shape every consumer relies on:

- ingredients and instructions are non-empty
- ingredient ``orderIndex`` and instruction ``stepNumber`` run densely 1..N
- ``thumbnailPath`` is always set
"""

from __future__ import annotations

from typing import Self

from pydantic import Field, model_validator

from recipe_extraction.schemas.base import APIResponse
from recipe_extraction.schemas.enums import Difficulty, Platform, RecipeQuality


class RecipeIngredient(APIResponse):
    """A single ingredient line, in source order."""

    name: str = Field(..., min_length=1, description="Ingredient name")
    quantity: float | None = Field(default=None, gt=0, description="Amount")
    unit: str | None = Field(default=None, description="Unit of measurement")
    notes: str | None = Field(default=None, description="Preparation notes")
    order_index: int = Field(..., ge=1, description="1-based position in the list")


class RecipeInstruction(APIResponse):
    """A single preparation step."""

    step_number: int = Field(..., ge=1, description="1-based step number")
    description: str = Field(..., min_length=1, description="Step text")


class ScreenshotCandidate(APIResponse):
    """A captured video frame the user may pick as the recipe image."""

    path: str = Field(..., description="Public path of the stored frame")
    timestamp_seconds: int = Field(..., ge=0, description="Video offset of the frame")


class CanonicalRecipe(APIResponse):
    """Normalized recipe with provenance annotations."""

    title: str = Field(..., min_length=1)
    description: str = ""
    prep_time: int | None = Field(default=None, gt=0, description="Minutes")
    cook_time: int | None = Field(default=None, gt=0, description="Minutes")
    serving_size: int | None = Field(default=None, gt=0)
    difficulty: Difficulty | None = None
    ingredients: list[RecipeIngredient] = Field(..., min_length=1)
    instructions: list[RecipeInstruction] = Field(..., min_length=1)
    tags: set[str] = Field(default_factory=set)
    thumbnail_path: str = Field(..., min_length=1)
    source_url: str
    source_type: Platform
    quality: RecipeQuality = RecipeQuality.COMPLETE
    is_synthetic: bool = False

    @model_validator(mode="after")
    def _check_dense_numbering(self) -> Self:
        order = [ingredient.order_index for ingredient in self.ingredients]
        if order != list(range(1, len(order) + 1)):
            msg = "ingredient orderIndex values must run 1..N in list order"
            raise ValueError(msg)
        steps = [instruction.step_number for instruction in self.instructions]
        if steps != list(range(1, len(steps) + 1)):
            msg = "instruction stepNumber values must run 1..N in list order"
            raise ValueError(msg)
        return self
