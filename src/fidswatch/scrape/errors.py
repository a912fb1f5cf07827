"""Exceptions raised along the scrape pipeline."""

from typing import Optional


class ScrapeError(Exception):
    """Base class for scrape pipeline errors."""


class FetchError(ScrapeError):
    """Network failure, timeout or non-success HTTP status for one URL."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status_code = status_code


class ExtractionEmpty(ScrapeError):
    """Table-based extraction found no usable rows."""

    def __init__(self, rows_seen: int = 0):
        super().__init__(f"no flight rows among {rows_seen} candidate rows")
        self.rows_seen = rows_seen


class RowRejected(ScrapeError):
    """A candidate row could not be turned into a flight record."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ParseTotalFailure(ScrapeError):
    """Neither the primary parser nor the fallback yielded any flight."""


class ScrapeCancelled(ScrapeError):
    """The scrape cycle was cancelled before it finished."""
