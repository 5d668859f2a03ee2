"""Thumbnail resolution exceptions.

None of these escape ``ThumbnailResolver.resolve_thumbnail``; each one marks
a cascade step that failed and hands control to the next step.
"""

from __future__ import annotations


class ThumbnailError(Exception):
    """Base exception for thumbnail resolution errors."""


class ThumbnailDownloadError(ThumbnailError):
    """Raised when a candidate image URL cannot be validated or downloaded."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url}")


class FrameCaptureError(ThumbnailError):
    """Raised when no video frame could be captured."""
