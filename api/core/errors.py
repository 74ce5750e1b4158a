from __future__ import annotations


class DeckError(Exception):
    """Base class for deck pipeline failures."""


class UpstreamFetchError(DeckError):
    """A catalog slice could not be fetched; the whole request fails."""

    def __init__(self, slice_key: str, message: str = ""):
        self.slice_key = slice_key
        super().__init__(message or f"Catalog fetch failed for {slice_key}")
