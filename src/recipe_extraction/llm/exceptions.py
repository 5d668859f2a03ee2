"""LLM client exceptions.

Every subclass of ``LLMError`` is a provider failure: the extraction gateway
catches it, records the failure kind and moves on to the next provider.
"""

from __future__ import annotations


class LLMError(Exception):
    """Base exception for LLM client errors."""


class LLMUnavailableError(LLMError):
    """Raised when the LLM service cannot be reached.

    Connection errors and exhausted retries end up here.
    """


class LLMTimeoutError(LLMUnavailableError):
    """Raised when an LLM request times out.

    A form of unavailability; retried before being raised.
    """


class LLMResponseError(LLMError):
    """Raised when the LLM returns an error response.

    Covers HTTP 4xx/5xx, error payloads inside 200 responses and bodies that
    are not valid JSON.
    """


class LLMEmptyResponseError(LLMResponseError):
    """Raised when the response carries no generated text."""


class LLMRateLimitError(LLMError):
    """Raised when the LLM service rate limits the request."""


class LLMConfigurationError(LLMError):
    """Raised when the LLM client is misconfigured (e.g. missing API key)."""
