"""LLM integration module.

Provider clients (OpenRouter, Gemini) and the recipe extraction prompt used
by the AI extraction gateway.
"""

from recipe_extraction.llm.client import GeminiClient, OpenRouterClient
from recipe_extraction.llm.exceptions import (
    LLMConfigurationError,
    LLMEmptyResponseError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from recipe_extraction.llm.models import LLMCompletionResult
from recipe_extraction.llm.prompts.base import BasePrompt


__all__ = [
    "BasePrompt",
    "GeminiClient",
    "LLMCompletionResult",
    "LLMConfigurationError",
    "LLMEmptyResponseError",
    "LLMError",
    "LLMRateLimitError",
    "LLMResponseError",
    "LLMTimeoutError",
    "LLMUnavailableError",
    "OpenRouterClient",
]
