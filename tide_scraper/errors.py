"""Exceptions raised by the tide scraper."""

from __future__ import annotations

from typing import Optional


class ScrapeError(Exception):
    """Base exception for scraping failures."""


class InvalidInputError(ScrapeError, ValueError):
    """Raised when a state or city identifier is empty."""


class FetchError(ScrapeError):
    """Raised when the page cannot be retrieved or the status is not 2xx."""

    def __init__(self, message: str, url: str, status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class CriticalParseError(ScrapeError):
    """Raised when traversing the located markup fails unexpectedly."""
