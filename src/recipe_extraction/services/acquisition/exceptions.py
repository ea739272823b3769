"""Content acquisition exceptions.

These exceptions are raised by individual ladder strategies and are always
caught inside the acquirer. They never reach the caller; a failed strategy
only moves the ladder to its next rung.
"""

from __future__ import annotations


class AcquisitionError(Exception):
    """Base exception for acquisition strategy failures."""


class FetchError(AcquisitionError):
    """Raised when an upstream request fails or answers non-2xx."""


class ContentRejectedError(AcquisitionError):
    """Raised when fetched text is too short or is a bot-challenge page."""
