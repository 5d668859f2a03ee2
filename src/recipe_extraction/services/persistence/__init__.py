"""Recipe persistence interface."""

from recipe_extraction.services.persistence.repository import (
    PersistenceError,
    RecipeRepository,
)


__all__ = ["PersistenceError", "RecipeRepository"]
