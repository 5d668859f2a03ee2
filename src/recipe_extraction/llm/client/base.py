"""Shared HTTP plumbing for provider clients.

Subclasses describe how to address their API and how to read its
responses; the retry loop, rate limiting and error mapping live here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
from aiolimiter import AsyncLimiter

from recipe_extraction.llm.exceptions import (
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from recipe_extraction.llm.models import LLMCompletionResult
from recipe_extraction.observability.logging import get_logger


logger = get_logger(__name__)


class HTTPLLMClient(ABC):
    """Base class for JSON-over-HTTP LLM providers.

    Attributes:
        provider: Provider name used in logs and envelopes.
        model: Default model.
        base_url: API base URL without trailing slash.
        timeout: HTTP request timeout in seconds.
        max_retries: Retries for timeouts and connection errors.
    """

    provider: str = "llm"

    def __init__(
        self,
        *,
        model: str,
        base_url: str,
        timeout: float = 60.0,
        max_retries: int = 1,
        requests_per_minute: float | None = None,
    ) -> None:
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._http_client: httpx.AsyncClient | None = None
        # 1 request per (60/rpm) seconds, no initial burst
        self._rate_limiter = (
            AsyncLimiter(1, 60.0 / requests_per_minute) if requests_per_minute else None
        )

    @abstractmethod
    def _headers(self) -> dict[str, str]:
        """Headers sent with every request."""

    @abstractmethod
    def _endpoint(self, model: str) -> str:
        """URL to POST a completion request to."""

    @abstractmethod
    def _build_body(
        self,
        prompt: str,
        *,
        model: str,
        system: str | None,
        temperature: float,
        max_tokens: int | None,
    ) -> dict[str, Any]:
        """JSON body for a completion request."""

    @abstractmethod
    def _parse(self, payload: Any, model: str) -> LLMCompletionResult:
        """Turn a decoded response body into a completion result.

        Raises:
            LLMResponseError: If the body is an error or malformed.
            LLMEmptyResponseError: If it carries no text.
        """

    async def initialize(self) -> None:
        """Initialize the HTTP client with provider headers."""
        if self._http_client is not None:
            return

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={"Content-Type": "application/json", **self._headers()},
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
        )
        logger.info(
            f"{type(self).__name__} initialized",
            provider=self.provider,
            model=self.model,
            timeout=self.timeout,
        )

    async def shutdown(self) -> None:
        """Close the HTTP client and release connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug(f"{type(self).__name__} shutdown")

    async def generate(
        self,
        prompt: str,
        *,
        model: str | None = None,
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Generate a text completion.

        Raises:
            LLMUnavailableError: If the provider cannot be reached.
            LLMTimeoutError: If every attempt timed out.
            LLMRateLimitError: If the provider answered 429.
            LLMResponseError: If the provider returned an error.
            LLMEmptyResponseError: If the response carried no text.
        """
        use_model = model or self.model
        options = options or {}
        body = self._build_body(
            prompt,
            model=use_model,
            system=system,
            temperature=options.get("temperature", 0.2),
            max_tokens=options.get("max_tokens"),
        )
        payload = await self._execute_with_retry(self._endpoint(use_model), body)
        result = self._parse(payload, use_model)
        logger.debug(
            "LLM completion received",
            provider=self.provider,
            model=result.model,
            chars=len(result.raw_response),
            prompt_tokens=result.prompt_tokens,
            completion_tokens=result.completion_tokens,
        )
        return result

    async def _execute_with_retry(self, url: str, body: dict[str, Any]) -> Any:
        """POST with retries for transient failures; returns the decoded body."""
        if self._http_client is None:
            await self.initialize()

        assert self._http_client is not None

        name = self.provider
        last_exception: Exception | None = None

        for attempt in range(self.max_retries + 1):
            if self._rate_limiter is not None:
                await self._rate_limiter.acquire()

            try:
                response = await self._http_client.post(url, json=body)

                if response.status_code == 429:
                    retry_after = response.headers.get("retry-after", "60")
                    msg = f"{name} rate limit exceeded, retry after {retry_after}s"
                    raise LLMRateLimitError(msg)

                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                last_exception = e
                logger.warning(
                    "LLM request timeout",
                    provider=name,
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    timeout=self.timeout,
                )
                if attempt < self.max_retries:
                    continue
                msg = f"{name} timeout after {self.timeout}s"
                raise LLMTimeoutError(msg) from e

            except httpx.HTTPStatusError as e:
                logger.error(
                    "LLM request failed",
                    provider=name,
                    status_code=e.response.status_code,
                    body=e.response.text[:500],
                )
                msg = f"{name} returned {e.response.status_code}"
                raise LLMResponseError(msg) from e

            except httpx.RequestError as e:
                last_exception = e
                logger.warning(
                    "LLM connection error",
                    provider=name,
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    error=str(e),
                )
                if attempt < self.max_retries:
                    continue
                msg = f"Cannot connect to {name}: {e}"
                raise LLMUnavailableError(msg) from e

            except ValueError as e:
                msg = f"{name} returned a body that is not JSON"
                raise LLMResponseError(msg) from e

        msg = "Max retries exceeded"
        raise LLMUnavailableError(msg) from last_exception
