"""Content acquisition exceptions.

Most of these are absorbed inside the acquisition service and replaced by
the next fallback; only ``AcquisitionError`` itself reaches the pipeline,
which answers it with a synthetic recipe.
"""

from __future__ import annotations


class AcquisitionError(Exception):
    """Base exception for content acquisition errors."""


class MetadataFetchError(AcquisitionError):
    """Raised when oEmbed metadata cannot be fetched or parsed."""


class TranscriptUnavailableError(AcquisitionError):
    """Raised when a video has no retrievable transcript."""


class ScrapingError(AcquisitionError):
    """Raised when a post page cannot be scraped."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}")


class ScrapingTimeoutError(ScrapingError):
    """Raised when loading a post page exceeds its time budget."""
