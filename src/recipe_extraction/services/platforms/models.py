"""Data models for platform resolution."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from recipe_extraction.schemas.enums import Platform


class UrlShape(StrEnum):
    """Which URL convention a match came from."""

    WATCH = "watch"
    SHORTS = "shorts"
    SHORT_LINK = "short_link"
    EMBED = "embed"
    VIDEO = "video"
    POST = "post"
    REEL = "reel"
    TV = "tv"
    STORY = "story"
    NONE = "none"


class PlatformMatch(BaseModel):
    """Result of classifying a URL.

    Recomputed for every request and never stored.
    """

    model_config = ConfigDict(frozen=True)

    platform: Platform
    content_id: str = Field(default="", description="Platform-specific content ID")
    secondary_id: str | None = Field(
        default=None, description="Author handle when the URL carries one"
    )
    url_shape: UrlShape = UrlShape.NONE
    source_url: str = Field(..., description="Submitted URL with a scheme")

    @property
    def is_supported(self) -> bool:
        """Whether the URL resolved to a known platform with a content ID."""
        return self.platform is not Platform.UNKNOWN and bool(self.content_id)

    @property
    def content_kind(self) -> str:
        """Noun used for the post in templated text ("video", "reel", ...)."""
        if self.platform is Platform.INSTAGRAM:
            return {
                UrlShape.REEL: "reel",
                UrlShape.STORY: "story",
                UrlShape.TV: "video",
            }.get(self.url_shape, "post")
        return "video"

    @property
    def canonical_url(self) -> str:
        """Stable page URL to load when scraping the post."""
        match self.platform:
            case Platform.YOUTUBE:
                return f"https://www.youtube.com/watch?v={self.content_id}"
            case Platform.TIKTOK if self.url_shape is UrlShape.VIDEO:
                return (
                    f"https://www.tiktok.com/@{self.secondary_id}/video/"
                    f"{self.content_id}"
                )
            case Platform.INSTAGRAM if self.url_shape is UrlShape.STORY:
                return (
                    f"https://www.instagram.com/stories/{self.secondary_id}/"
                    f"{self.content_id}/"
                )
            case Platform.INSTAGRAM:
                segment = {UrlShape.REEL: "reel", UrlShape.TV: "tv"}.get(
                    self.url_shape, "p"
                )
                return f"https://www.instagram.com/{segment}/{self.content_id}/"
        # Short links only resolve through the platform's redirect
        return self.source_url
