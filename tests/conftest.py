# Ensure src/ is on sys.path for tests
import sys
from http import HTTPStatus
from pathlib import Path

import pytest

root = Path(__file__).resolve().parent.parent
src = root / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from brokenlinks.fetch import FetchResult  # noqa: E402


class FakeSite:
    """In-memory stand-in for the Fetcher: url -> (status, content_type, body)."""

    def __init__(self, pages, get_overrides=None, errors=None):
        self.pages = dict(pages)
        self.get_overrides = dict(get_overrides or {})
        self.errors = dict(errors or {})
        self.calls = []

    def _result(self, url, pages, with_body):
        if url in self.errors:
            return FetchResult(url=url, error=self.errors[url])
        status, content_type, body = pages.get(url, (404, "text/html", ""))
        return FetchResult(
            url=url,
            status_code=status,
            reason=HTTPStatus(status).phrase,
            content_type=content_type,
            body=body if with_body else "",
        )

    def fetch_full(self, url):
        self.calls.append(("GET", url))
        return self._result(url, {**self.pages, **self.get_overrides}, with_body=True)

    def check_exists(self, url):
        self.calls.append(("HEAD", url))
        return self._result(url, self.pages, with_body=False)

    def requested(self, method):
        return [url for m, url in self.calls if m == method]

    def close(self):
        pass


class RecordingLimiter:
    def __init__(self):
        self.pauses = 0

    def pause(self):
        self.pauses += 1


@pytest.fixture
def limiter():
    return RecordingLimiter()


@pytest.fixture
def fake_site():
    return FakeSite
