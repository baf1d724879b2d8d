"""
Exceptions raised by the link checker.
"""
from __future__ import annotations


class BrokenLinksError(Exception):
    """Base class for all link checker errors."""


class MalformedURLError(BrokenLinksError, ValueError):
    """A reference could not be resolved to a valid absolute URL."""

    def __init__(self, reference: str, reason: str) -> None:
        super().__init__(f"Malformed URL {reference!r}: {reason}")
        self.reference = reference
        self.reason = reason


class SeedFetchError(BrokenLinksError):
    """The base URL itself could not be retrieved."""

    def __init__(self, url: str, status: str) -> None:
        super().__init__(f"Cannot fetch base URL {url}: {status}")
        self.url = url
        self.status = status


class ReportSinkError(BrokenLinksError):
    """The report destination could not be opened, written or closed."""
