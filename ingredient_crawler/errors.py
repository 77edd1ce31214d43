from __future__ import annotations


class CrawlerError(Exception):
    """
    Base class for failures that abort a single extraction.
    Missing fields or ingredient blocks are never raised; they degrade to empty values.
    """

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class NavigationError(CrawlerError):
    """The page could not be loaded, so nothing can be extracted from it."""


class SessionError(CrawlerError):
    """The rendering session (browser or HTTP client) is unusable."""
