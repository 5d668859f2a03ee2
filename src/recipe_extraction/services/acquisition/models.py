"""Data models for content acquisition."""

from __future__ import annotations

from pydantic import BaseModel, Field

from recipe_extraction.schemas.base import DownstreamResponse
from recipe_extraction.schemas.recipe import ScreenshotCandidate


class OEmbedMetadata(DownstreamResponse):
    """Subset of the oEmbed response used for YouTube videos."""

    title: str | None = None
    author_name: str | None = Field(default=None, alias="author_name")
    thumbnail_url: str | None = Field(default=None, alias="thumbnail_url")


class PageMetadata(BaseModel):
    """Metadata scraped from a rendered post page."""

    title: str | None = None
    description: str | None = None
    image: str | None = None
    url: str | None = None
    author: str | None = None

    @property
    def has_content(self) -> bool:
        """Whether the page yielded any text worth sending to the AI step."""
        return bool(self.title or self.description)


class AcquiredContent(BaseModel):
    """Everything gathered about one post; lives for a single extraction."""

    text: str = Field(..., description="Assembled description for the AI step")
    title: str | None = Field(default=None, description="Best known post title")
    thumbnail_url: str | None = None
    thumbnail_local_path: str | None = None
    screenshot_candidates: list[ScreenshotCandidate] = Field(default_factory=list)
    has_transcript: bool = False
