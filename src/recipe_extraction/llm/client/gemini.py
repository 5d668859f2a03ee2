"""HTTP client for Google's Gemini API.

Secondary provider, called directly when OpenRouter cannot produce a
usable recipe.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from recipe_extraction.llm.client.base import HTTPLLMClient
from recipe_extraction.llm.exceptions import (
    LLMConfigurationError,
    LLMEmptyResponseError,
    LLMResponseError,
)
from recipe_extraction.llm.models import (
    GeminiContent,
    GeminiGenerateRequest,
    GeminiGenerateResponse,
    GeminiGenerationConfig,
    GeminiPart,
    LLMCompletionResult,
)


class GeminiClient(HTTPLLMClient):
    """Async client for ``models/{model}:generateContent``."""

    provider = "gemini"
    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-pro",
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = 60.0,
        max_retries: int = 1,
    ) -> None:
        super().__init__(
            model=model,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )
        if not api_key:
            msg = "Gemini API key is not configured"
            raise LLMConfigurationError(msg)
        self.api_key = api_key

    def _headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self.api_key}

    def _endpoint(self, model: str) -> str:
        return f"{self.base_url}/models/{model}:generateContent"

    def _build_body(
        self,
        prompt: str,
        *,
        model: str,
        system: str | None,
        temperature: float,
        max_tokens: int | None,
    ) -> dict[str, Any]:
        request = GeminiGenerateRequest(
            contents=[GeminiContent(role="user", parts=[GeminiPart(text=prompt)])],
            system_instruction=(
                GeminiContent(parts=[GeminiPart(text=system)]) if system else None
            ),
            generation_config=GeminiGenerationConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
            ),
        )
        return request.model_dump(by_alias=True, exclude_none=True)

    def _parse(self, payload: Any, model: str) -> LLMCompletionResult:
        try:
            response = GeminiGenerateResponse.model_validate(payload)
        except ValidationError as e:
            msg = f"Gemini response for {model} is malformed"
            raise LLMResponseError(msg) from e

        text = response.text
        if not text:
            reason = response.candidates[0].finish_reason if response.candidates else None
            msg = f"Gemini returned no content for {model} (finish reason: {reason})"
            raise LLMEmptyResponseError(msg)

        usage = response.usage_metadata
        return LLMCompletionResult(
            raw_response=text,
            provider=self.provider,
            model=model,
            prompt_tokens=usage.prompt_token_count if usage else None,
            completion_tokens=usage.candidates_token_count if usage else None,
        )
