"""Platform resolution exceptions."""

from __future__ import annotations


class PlatformResolutionError(Exception):
    """Base exception for platform resolution errors."""


class InvalidURLError(PlatformResolutionError):
    """Raised when a URL does not belong to a supported platform.

    Also raised when the caller declared a platform and the URL does not
    match any of that platform's URL shapes. Never retried.
    """

    def __init__(self, url: str, reason: str, *, field: str = "url") -> None:
        self.url = url
        self.reason = reason
        self.field = field
        super().__init__(f"{reason}: {url}")
