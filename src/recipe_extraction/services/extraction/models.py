"""AI extraction result envelope.

The gateway never raises for provider problems; it returns either an
``ExtractionSuccess`` with the recovered recipe data or an
``ExtractionFailure`` listing every attempt that was made.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field


class FailureKind(StrEnum):
    """Why an extraction step did not produce a recipe."""

    NOT_CONFIGURED = "not_configured"
    API_ERROR = "api_error"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    EMPTY_RESPONSE = "empty_response"
    JSON_RECOVERY = "json_recovery"
    ACQUISITION = "acquisition"


class ProviderAttempt(BaseModel):
    """One failed provider call."""

    provider: str
    model: str
    kind: FailureKind
    detail: str = ""

    model_config = {"frozen": True}


class ExtractionSuccess(BaseModel):
    """Recipe data recovered from a provider response."""

    status: Literal["success"] = "success"
    data: dict[str, Any]
    provider: str
    model: str
    strategy: str = Field(..., description="Recovery strategy that succeeded")
    partial: bool = Field(
        default=False, description="Placeholders filled in for a missing list"
    )
    attempts: list[ProviderAttempt] = Field(
        default_factory=list, description="Failed attempts before this success"
    )

    model_config = {"frozen": True}


class ExtractionFailure(BaseModel):
    """Every provider and strategy failed (or content was never acquired)."""

    status: Literal["failure"] = "failure"
    kind: FailureKind
    detail: str = ""
    attempts: list[ProviderAttempt] = Field(default_factory=list)

    model_config = {"frozen": True}

    @classmethod
    def from_attempts(cls, attempts: list[ProviderAttempt]) -> ExtractionFailure:
        """Summarize attempts; a recovery failure outranks the others."""
        if not attempts:
            return cls(
                kind=FailureKind.NOT_CONFIGURED,
                detail="No AI provider is configured",
            )
        recovery = next(
            (a for a in attempts if a.kind is FailureKind.JSON_RECOVERY), None
        )
        chosen = recovery or attempts[-1]
        return cls(
            kind=chosen.kind,
            detail=f"{chosen.provider}/{chosen.model}: {chosen.detail}",
            attempts=attempts,
        )


ExtractionEnvelope = ExtractionSuccess | ExtractionFailure
