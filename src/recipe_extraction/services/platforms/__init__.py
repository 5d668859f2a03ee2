"""Platform resolution for social-media URLs."""

from recipe_extraction.services.platforms.exceptions import (
    InvalidURLError,
    PlatformResolutionError,
)
from recipe_extraction.services.platforms.models import PlatformMatch, UrlShape
from recipe_extraction.services.platforms.resolver import PlatformResolver


__all__ = [
    "InvalidURLError",
    "PlatformMatch",
    "PlatformResolutionError",
    "PlatformResolver",
    "UrlShape",
]
