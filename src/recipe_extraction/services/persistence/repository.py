"""Persistence collaborator interface.

The service never owns recipe storage; the host application supplies a
repository at startup (``app.state.recipe_repository``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from recipe_extraction.schemas.recipe import CanonicalRecipe


class PersistenceError(Exception):
    """Raised by repositories when a recipe cannot be stored."""


@runtime_checkable
class RecipeRepository(Protocol):
    """Stores canonical recipes on behalf of a user."""

    async def save(self, recipe: CanonicalRecipe, owner_id: int) -> str:
        """Persist ``recipe`` for ``owner_id``.

        Returns:
            Identifier of the stored recipe.

        Raises:
            PersistenceError: If the recipe could not be stored.
        """
        ...
