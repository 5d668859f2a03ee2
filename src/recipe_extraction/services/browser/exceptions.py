"""Headless browser exceptions."""

from __future__ import annotations


class BrowserError(Exception):
    """Base exception for headless browser errors."""


class BrowserUnavailableError(BrowserError):
    """Raised when the shared browser cannot be launched.

    Usually a missing Chromium install or a sandbox restriction. Callers
    treat it like any other scraping failure and fall back.
    """
