"""Thumbnail resolution with a download, capture, placeholder cascade."""

from recipe_extraction.services.thumbnails.exceptions import (
    FrameCaptureError,
    ThumbnailDownloadError,
    ThumbnailError,
)
from recipe_extraction.services.thumbnails.models import (
    ThumbnailResolution,
    ThumbnailSource,
)
from recipe_extraction.services.thumbnails.service import (
    ThumbnailResolver,
    select_representative_frame,
)
from recipe_extraction.services.thumbnails.storage import LocalImageStorage


__all__ = [
    "FrameCaptureError",
    "LocalImageStorage",
    "ThumbnailDownloadError",
    "ThumbnailError",
    "ThumbnailResolution",
    "ThumbnailResolver",
    "ThumbnailSource",
    "select_representative_frame",
]
