"""HTTP client for OpenRouter.

OpenRouter exposes an OpenAI-compatible chat completions API in front of many
hosted models; it serves both the primary and the fallback model.
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
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
    LLMCompletionResult,
)


class OpenRouterClient(HTTPLLMClient):
    """Async client for OpenRouter chat completions.

    Attributes:
        api_key: OpenRouter API key.
        referer: Value of the ``HTTP-Referer`` attribution header.
        app_title: Value of the ``X-Title`` attribution header.
    """

    provider = "openrouter"
    DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        referer: str | None = None,
        app_title: str | None = None,
        timeout: float = 60.0,
        max_retries: int = 1,
        requests_per_minute: float | None = 20.0,
    ) -> None:
        super().__init__(
            model=model,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            requests_per_minute=requests_per_minute,
        )
        if not api_key:
            msg = "OpenRouter API key is not configured"
            raise LLMConfigurationError(msg)
        self.api_key = api_key
        self.referer = referer
        self.app_title = app_title

    @property
    def chat_url(self) -> str:
        """Get the chat completions endpoint URL."""
        return f"{self.base_url}/chat/completions"

    def _headers(self) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.app_title:
            headers["X-Title"] = self.app_title
        return headers

    def _endpoint(self, model: str) -> str:
        return self.chat_url

    def _build_body(
        self,
        prompt: str,
        *,
        model: str,
        system: str | None,
        temperature: float,
        max_tokens: int | None,
    ) -> dict[str, Any]:
        messages: list[ChatMessage] = []
        if system:
            messages.append(ChatMessage(role="system", content=system))
        messages.append(ChatMessage(role="user", content=prompt))

        request = ChatCompletionRequest(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return request.model_dump(exclude_none=True)

    def _parse(self, payload: Any, model: str) -> LLMCompletionResult:
        try:
            response = ChatCompletionResponse.model_validate(payload)
        except ValidationError as e:
            msg = f"OpenRouter response for {model} is malformed"
            raise LLMResponseError(msg) from e

        # Upstream provider errors can arrive with a 200 status
        if response.error is not None:
            msg = f"OpenRouter error for {model}: {response.error.message}"
            raise LLMResponseError(msg)

        text = response.text
        if not text:
            msg = f"OpenRouter returned no content for {model}"
            raise LLMEmptyResponseError(msg)

        usage = response.usage
        return LLMCompletionResult(
            raw_response=text,
            provider=self.provider,
            model=response.model or model,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
        )
