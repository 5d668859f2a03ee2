"""LLM Client Protocol definition.

Defines the interface every provider client implements so the extraction
gateway can walk an ordered list of providers without knowing their APIs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from recipe_extraction.llm.models import LLMCompletionResult


@runtime_checkable
class LLMClientProtocol(Protocol):
    """Protocol for LLM client implementations.

    Key members:
    - provider: Short provider name used in logs, metrics and envelopes
    - model: Default model used when ``generate`` gets no override
    - generate: Single text completion
    - initialize/shutdown: Lifecycle management for connection pools
    """

    provider: str
    model: str

    async def initialize(self) -> None:
        """Initialize client resources (HTTP connections, etc.)."""
        ...

    async def shutdown(self) -> None:
        """Release client resources."""
        ...

    async def generate(
        self,
        prompt: str,
        *,
        model: str | None = None,
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Generate a text completion.

        Args:
            prompt: Input prompt text.
            model: Model override (uses client default if None).
            system: Optional system prompt.
            options: Sampling options (``temperature``, ``max_tokens``).

        Returns:
            LLMCompletionResult with the raw generated text.

        Raises:
            LLMUnavailableError: Service unreachable.
            LLMTimeoutError: Request timed out.
            LLMRateLimitError: Provider rejected the request with 429.
            LLMResponseError: HTTP error or malformed body from service.
            LLMEmptyResponseError: Response carried no text.
        """
        ...
