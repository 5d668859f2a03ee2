"""Recipe assembly from extraction results."""

from recipe_extraction.services.assembly.assembler import RecipeAssembler


__all__ = ["RecipeAssembler"]
