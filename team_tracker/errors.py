"""
Error types raised by the tracker.

TransportError is fatal for a single fetch-classify cycle. DataShapeError means
the payload arrived but holds nothing usable; callers render placeholders.
"""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for tracker errors."""


class TransportError(TrackerError):
    """Network failure, non-2xx HTTP status, or a non-JSON response body."""

    def __init__(self, message: str, url: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DataShapeError(TrackerError):
    """The schedule payload is missing its events or season record."""
