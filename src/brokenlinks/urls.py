"""
URL normalization and scope rules.
"""
from __future__ import annotations

import re
from urllib.parse import urldefrag, urljoin, urlsplit, urlunsplit

from requests.utils import requote_uri

from brokenlinks.errors import MalformedURLError

HTTP_SCHEMES: frozenset[str] = frozenset(("http", "https"))
DEFAULT_PORTS = {"http": 80, "https": 443}

_ESCAPE_RE = re.compile(r"%[0-9a-fA-F]{2}")


def _canonical_escapes(part: str) -> str:
    """Decode unreserved escapes, quote illegal characters, upper-case the rest."""
    if not part:
        return part
    return _ESCAPE_RE.sub(lambda m: m.group(0).upper(), requote_uri(part))


def normalize_url(reference: str, base: str) -> str:
    """
    Resolve a link reference against a base URL into its canonical absolute form.

    - Joins relative, scheme-relative and query-only references against base
    - Drops fragments (#...)
    - Lowercases scheme and host, removes default ports (:80, :443)
    - Canonicalizes percent-escapes in path and query

    Non-http(s) references (mailto:, javascript:, ...) are only resolved and
    defragmented; callers filter them with is_http_url().

    Raises MalformedURLError when the reference cannot be parsed.
    """
    if reference is None:
        raise MalformedURLError("", "empty reference")

    try:
        joined, _ = urldefrag(urljoin(base, reference.strip()))
        parsed = urlsplit(joined)
        scheme = parsed.scheme.lower()

        if scheme not in HTTP_SCHEMES:
            return urlunsplit((scheme, parsed.netloc, parsed.path, parsed.query, ""))

        hostname = parsed.hostname
        port = parsed.port
    except ValueError as exc:
        raise MalformedURLError(reference, str(exc)) from exc

    if not hostname:
        raise MalformedURLError(reference, "missing host")

    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None and port != DEFAULT_PORTS[scheme]:
        host = f"{host}:{port}"

    userinfo, at, _ = parsed.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{host}"

    return urlunsplit((
        scheme,
        netloc,
        _canonical_escapes(parsed.path) or "/",
        _canonical_escapes(parsed.query),
        "",  # No fragment
    ))


def is_http_url(url: str) -> bool:
    """Check if an absolute URL uses the http or https scheme."""
    return urlsplit(url).scheme in HTTP_SCHEMES


def in_scope(url: str, base_url: str) -> bool:
    """
    Check if a URL belongs to the crawl scope of base_url.

    This is a plain substring test on the textual URL, so subdomains or URLs
    that embed the base URL elsewhere (e.g. in a query string) also match.
    """
    return base_url in url
