"""AI extraction exceptions."""

from __future__ import annotations


class ExtractionError(Exception):
    """Base exception for the AI extraction stage."""


class JSONRecoveryError(ExtractionError):
    """Raised when no recipe JSON can be recovered from model output."""
