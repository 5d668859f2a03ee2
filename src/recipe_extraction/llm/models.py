"""LLM client data models.

Request/response models for the OpenAI-compatible chat completions API
(OpenRouter) and the Gemini ``generateContent`` API.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from recipe_extraction.schemas.base import DownstreamRequest, DownstreamResponse


class LLMCompletionResult(BaseModel):
    """Provider-agnostic result of one completion call."""

    raw_response: str = Field(..., description="Raw text response from LLM")
    provider: str = Field(..., description="Provider that served the request")
    model: str = Field(..., description="Model that generated response")
    prompt_tokens: int | None = Field(default=None, description="Input token count")
    completion_tokens: int | None = Field(
        default=None, description="Output token count"
    )

    model_config = {"frozen": True}


# =============================================================================
# OpenAI-compatible chat completions (OpenRouter)
# =============================================================================


class ChatMessage(BaseModel):
    """Single message in chat format."""

    role: str = Field(..., description="Message role: system, user, or assistant")
    content: str | None = Field(default=None, description="Message content")


class ChatCompletionRequest(BaseModel):
    """Request body for ``/chat/completions``."""

    model: str
    messages: list[ChatMessage]
    temperature: float = 0.2
    max_tokens: int | None = None


class ChatCompletionChoice(BaseModel):
    """Single completion choice."""

    index: int = 0
    message: ChatMessage
    finish_reason: str | None = None


class ChatCompletionUsage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionError(BaseModel):
    """Error object some gateways return with a 200 status."""

    message: str = ""
    code: int | str | None = None


class ChatCompletionResponse(BaseModel):
    """Response from ``/chat/completions``."""

    id: str | None = None
    model: str | None = None
    choices: list[ChatCompletionChoice] = Field(default_factory=list)
    usage: ChatCompletionUsage | None = None
    error: ChatCompletionError | None = None

    @property
    def text(self) -> str:
        """Content of the first choice, or empty string."""
        if not self.choices:
            return ""
        return (self.choices[0].message.content or "").strip()


# =============================================================================
# Gemini generateContent
# =============================================================================


class GeminiPart(DownstreamResponse):
    """Single content part."""

    text: str | None = None


class GeminiContent(DownstreamResponse):
    """A turn of content made of parts."""

    role: str | None = None
    parts: list[GeminiPart] = Field(default_factory=list)


class GeminiGenerationConfig(DownstreamRequest):
    """Sampling configuration."""

    temperature: float = 0.2
    max_output_tokens: int | None = None


class GeminiGenerateRequest(DownstreamRequest):
    """Request body for ``models/{model}:generateContent``."""

    contents: list[GeminiContent]
    system_instruction: GeminiContent | None = None
    generation_config: GeminiGenerationConfig = GeminiGenerationConfig()


class GeminiCandidate(DownstreamResponse):
    """Single generated candidate."""

    content: GeminiContent | None = None
    finish_reason: str | None = None


class GeminiUsage(DownstreamResponse):
    """Token usage metadata."""

    prompt_token_count: int | None = None
    candidates_token_count: int | None = None


class GeminiGenerateResponse(DownstreamResponse):
    """Response from ``generateContent``."""

    candidates: list[GeminiCandidate] = Field(default_factory=list)
    usage_metadata: GeminiUsage | None = None

    @property
    def text(self) -> str:
        """Concatenated text parts of the first candidate, or empty string."""
        if not self.candidates or self.candidates[0].content is None:
            return ""
        parts = self.candidates[0].content.parts
        return "".join(part.text or "" for part in parts).strip()
