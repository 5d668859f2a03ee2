"""Data models for thumbnail resolution."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from recipe_extraction.schemas.recipe import ScreenshotCandidate


class ThumbnailSource(StrEnum):
    """Cascade step that produced the thumbnail."""

    DOWNLOADED = "downloaded"
    CAPTURED_FRAME = "captured_frame"
    DEFAULT = "default"


class ThumbnailResolution(BaseModel):
    """Resolved thumbnail plus any frames kept for the user to choose from."""

    path: str = Field(..., description="Public path of the chosen image")
    source: ThumbnailSource
    candidates: list[ScreenshotCandidate] = Field(default_factory=list)
