"""LLM provider clients."""

from recipe_extraction.llm.client.base import HTTPLLMClient
from recipe_extraction.llm.client.gemini import GeminiClient
from recipe_extraction.llm.client.openrouter import OpenRouterClient
from recipe_extraction.llm.client.protocol import LLMClientProtocol


__all__ = [
    "GeminiClient",
    "HTTPLLMClient",
    "LLMClientProtocol",
    "OpenRouterClient",
]
