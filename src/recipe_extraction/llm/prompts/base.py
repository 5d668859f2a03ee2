"""Base class for LLM prompts.

Provides a standardized interface for defining prompts with:
- Typed input variables
- An output schema describing the expected JSON
- Generation options
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel


class BasePrompt[T: BaseModel](ABC):
    """Base class for all LLM prompts.

    Keeps prompt text in one place so it can be versioned and tested, and
    carries the generation options that go with it.

    Example:
        ```python
        class TitlePrompt(BasePrompt[RecipeTitle]):
            output_schema = RecipeTitle
            system_prompt = "You name recipes."

            def format(self, content: str) -> str:
                return f"Name this recipe:\\n\\n{content}"
        ```
    """

    # Override in subclasses
    output_schema: ClassVar[type[BaseModel]]
    """Pydantic model describing the JSON the model should return."""

    system_prompt: ClassVar[str | None] = None
    """Optional system prompt to set context for the LLM."""

    temperature: ClassVar[float] = 0.2
    """Temperature for generation (low = more deterministic)."""

    max_tokens: ClassVar[int | None] = None
    """Maximum tokens to generate (None = provider default)."""

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Format the prompt template with input variables.

        Raises:
            ValueError: If required variables are missing.
        """
        ...

    @property
    def name(self) -> str:
        """Prompt identifier for logging."""
        return self.__class__.__name__

    def get_options(self) -> dict[str, Any]:
        """Generation options for this prompt."""
        options: dict[str, Any] = {"temperature": self.temperature}
        if self.max_tokens is not None:
            options["max_tokens"] = self.max_tokens
        return options
