"""Content acquisition: oEmbed, transcripts and page scraping."""

from recipe_extraction.services.acquisition.exceptions import (
    AcquisitionError,
    MetadataFetchError,
    ScrapingError,
    ScrapingTimeoutError,
    TranscriptUnavailableError,
)
from recipe_extraction.services.acquisition.models import (
    AcquiredContent,
    OEmbedMetadata,
    PageMetadata,
)
from recipe_extraction.services.acquisition.service import ContentAcquisitionService
from recipe_extraction.services.acquisition.transcripts import TranscriptFetcher


__all__ = [
    "AcquiredContent",
    "AcquisitionError",
    "ContentAcquisitionService",
    "MetadataFetchError",
    "OEmbedMetadata",
    "PageMetadata",
    "ScrapingError",
    "ScrapingTimeoutError",
    "TranscriptFetcher",
    "TranscriptUnavailableError",
]
