"""Enumeration types shared across the extraction pipeline and the API."""

from __future__ import annotations

from enum import StrEnum


class Platform(StrEnum):
    """Social-media platforms a post URL can belong to."""

    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        """Human-facing platform name used in templated text."""
        return {
            Platform.YOUTUBE: "YouTube",
            Platform.TIKTOK: "TikTok",
            Platform.INSTAGRAM: "Instagram",
        }.get(self, "Unknown")


class Difficulty(StrEnum):
    """Recipe difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class RecipeQuality(StrEnum):
    """Provenance of the data in an assembled recipe.

    - COMPLETE: every field came from a structured AI response
    - PARTIAL: AI output was recovered field by field and gaps were filled
      with placeholders the user must correct
    - TEMPLATED: AI output was unusable; a template carries the scraped title
    - SYNTHETIC: nothing usable was recovered; fully generic template
    """

    COMPLETE = "complete"
    PARTIAL = "partial"
    TEMPLATED = "templated"
    SYNTHETIC = "synthetic"

    @property
    def is_synthetic(self) -> bool:
        """Whether the recipe body was generated rather than extracted."""
        return self in (RecipeQuality.TEMPLATED, RecipeQuality.SYNTHETIC)


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
