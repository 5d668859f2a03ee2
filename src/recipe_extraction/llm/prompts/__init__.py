"""Prompt definitions for AI recipe extraction."""

from .base import BasePrompt
from .recipe_extraction import ExtractedRecipe, RecipeExtractionPrompt


__all__ = [
    "BasePrompt",
    "ExtractedRecipe",
    "RecipeExtractionPrompt",
]
