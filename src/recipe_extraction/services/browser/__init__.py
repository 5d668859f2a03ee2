"""Shared headless browser resource."""

from recipe_extraction.services.browser.exceptions import (
    BrowserError,
    BrowserUnavailableError,
)
from recipe_extraction.services.browser.manager import BrowserManager


__all__ = [
    "BrowserError",
    "BrowserManager",
    "BrowserUnavailableError",
]
