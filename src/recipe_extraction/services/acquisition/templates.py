"""Text assembled from acquired metadata for the AI extraction step.

Each builder produces labelled sections separated by blank lines. The
labels matter: the prompt tells the model what kind of source it is reading,
and the no-transcript note stops it from expecting spoken steps.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from recipe_extraction.schemas.enums import Platform


if TYPE_CHECKING:
    from recipe_extraction.services.platforms.models import PlatformMatch


NO_TRANSCRIPT_NOTE = (
    "Note: This video does not have captions or a transcript available. "
    "The AI will attempt to generate a recipe based on the title and description."
)

TIKTOK_NOTE = (
    "This is a cooking video from TikTok. Please extract the recipe details "
    "from the title and description."
)


def _sections(*pairs: tuple[str, str | None]) -> list[str]:
    return [f"{label}: {value}" for label, value in pairs if value]


def build_youtube_text(
    *,
    title: str,
    creator: str | None,
    description: str | None,
    transcript: str | None,
) -> str:
    """Assemble YouTube text; flags the missing transcript explicitly."""
    parts = _sections(
        ("Title", title),
        ("Creator", creator),
        ("Description", description),
        ("Transcript", transcript),
    )
    if not transcript:
        parts.append(NO_TRANSCRIPT_NOTE)
    return "\n\n".join(parts)


def build_social_text(
    match: PlatformMatch,
    *,
    title: str | None,
    author: str | None,
    caption: str | None,
) -> str:
    """Assemble TikTok or Instagram text from scraped page metadata."""
    handle = f"@{author.lstrip('@')}" if author else None
    if match.platform is Platform.TIKTOK:
        parts = _sections(
            ("TikTok video", title),
            ("Creator", handle),
            ("Description", caption),
        )
        parts.append(TIKTOK_NOTE)
    else:
        parts = _sections(
            (f"Instagram {match.content_kind}", title),
            ("Creator", handle),
            ("Caption", caption),
        )
    return "\n\n".join(parts)


def build_fallback_text(match: PlatformMatch, author: str | None = None) -> str:
    """Generic description used when the post page could not be scraped."""
    platform = match.platform.display_name
    kind = match.content_kind
    by = f"@{author.lstrip('@')}" if author else "unknown user"
    return (
        f"{platform} {kind} {match.content_id} by {by}. "
        f"This appears to be a cooking {kind} showing a recipe preparation. "
        f"Please create a plausible recipe based on typical dishes shared on {platform}."
    )
