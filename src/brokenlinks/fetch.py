"""
HTTP access for the crawler: full page retrieval, lightweight existence
checks and the pause imposed after every request.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from brokenlinks import __version__

DEFAULT_USER_AGENT = f"BrokenLinks/{__version__}"
DEFAULT_TIMEOUT_S = 15.0

HTML_CONTENT_TYPES: frozenset[str] = frozenset(("text/html", "application/xhtml+xml"))


@dataclass(slots=True, frozen=True)
class FetchResult:
    """Outcome of a single request: either an HTTP response or a transport error."""
    url: str
    status_code: Optional[int] = None
    reason: str = ""
    content_type: str = ""
    body: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True for a 2xx response."""
        return self.status_code is not None and 200 <= self.status_code < 300

    @property
    def status_line(self) -> str:
        """Human-readable status, e.g. '404 Not Found' or 'Connection error: ...'."""
        if self.status_code is None:
            return self.error or "Request error"
        return f"{self.status_code} {self.reason}".strip()

    @property
    def media_type(self) -> str:
        """Content type without parameters, lowercased."""
        return self.content_type.split(";", 1)[0].strip().lower()

    @property
    def is_html(self) -> bool:
        return self.media_type in HTML_CONTENT_TYPES


def describe_error(exc: requests.RequestException) -> str:
    """Turn a transport exception into a report-friendly status description."""
    if isinstance(exc, requests.Timeout):
        label = "Timeout"
    elif isinstance(exc, requests.ConnectionError):
        label = "Connection error"
    elif isinstance(exc, requests.TooManyRedirects):
        label = "Too many redirects"
    else:
        label = "Request error"
    return f"{label}: {exc}"


class Fetcher:
    """Issues GET and HEAD requests over a shared requests.Session."""

    def __init__(
        self,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent

    def fetch_full(self, url: str) -> FetchResult:
        """Retrieve a page including its body."""
        try:
            resp = self.session.get(url, timeout=self.timeout_s, allow_redirects=True)
        except requests.RequestException as e:
            return FetchResult(url=url, error=describe_error(e))
        return FetchResult(
            url=url,
            status_code=resp.status_code,
            reason=resp.reason or "",
            content_type=resp.headers.get("content-type") or "",
            body=resp.text or "",
        )

    def check_exists(self, url: str) -> FetchResult:
        """Check a URL with a HEAD request; the body is never downloaded."""
        try:
            resp = self.session.head(url, timeout=self.timeout_s, allow_redirects=True)
        except requests.RequestException as e:
            return FetchResult(url=url, error=describe_error(e))
        return FetchResult(
            url=url,
            status_code=resp.status_code,
            reason=resp.reason or "",
            content_type=resp.headers.get("content-type") or "",
        )

    def close(self) -> None:
        self.session.close()


class RateLimiter:
    """Sleeps for a fixed gap after every network request."""

    def __init__(self, gap_s: float, sleep: Callable[[float], None] = time.sleep) -> None:
        self.gap_s = gap_s
        self._sleep = sleep
        self.pauses = 0

    def pause(self) -> None:
        self.pauses += 1
        if self.gap_s > 0:
            self._sleep(self.gap_s)
