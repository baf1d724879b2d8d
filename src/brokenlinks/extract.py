"""
Link and image extraction from fetched HTML documents.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from bs4 import BeautifulSoup, SoupStrainer, Tag


class ReferenceKind(Enum):
    LINK = "link"
    IMAGE = "image"


@dataclass(slots=True, frozen=True)
class Reference:
    """A hyperlink or image reference found on a page."""
    kind: ReferenceKind
    source_url: str
    target: str


# Tag -> attribute holding the referenced URL
LINK_ATTRIBUTES = {
    "a": "href",
    "area": "href",
    "link": "href",
    "frame": "src",
    "iframe": "src",
}
IMAGE_ATTRIBUTES = {
    "img": "src",
    "input": "src",  # only type="image"
}

# SoupStrainer to parse only tags that can carry a reference
REFERENCE_STRAINER = SoupStrainer([*LINK_ATTRIBUTES, *IMAGE_ATTRIBUTES, "meta"])

_REFRESH_URL_RE = re.compile(r"""^\s*\d*(?:\.\d*)?\s*[;,]\s*url\s*=\s*['"]?([^'"]+)""", re.I)


def refresh_target(content: str) -> Optional[str]:
    """Extract the URL from a meta refresh content value ('5; url=/next')."""
    match = _REFRESH_URL_RE.match(content or "")
    return match.group(1).strip() if match else None


def _classify(tag: Tag) -> Optional[tuple[ReferenceKind, Optional[str]]]:
    name = tag.name
    if name in LINK_ATTRIBUTES:
        return ReferenceKind.LINK, tag.get(LINK_ATTRIBUTES[name])
    if name == "img":
        return ReferenceKind.IMAGE, tag.get("src")
    if name == "input" and (tag.get("type") or "").lower() == "image":
        return ReferenceKind.IMAGE, tag.get("src")
    if name == "meta" and (tag.get("http-equiv") or "").lower() == "refresh":
        return ReferenceKind.LINK, refresh_target(tag.get("content") or "")
    return None


def extract_references(body: str, page_url: str) -> Iterator[Reference]:
    """Yield all link and image references of a document, in document order."""
    if not body:
        return

    soup = BeautifulSoup(body, "lxml", parse_only=REFERENCE_STRAINER)
    for tag in soup.find_all(True):
        found = _classify(tag)
        if found is None:
            continue
        kind, target = found
        if isinstance(target, list):
            target = " ".join(target)
        if target and target.strip():
            yield Reference(kind=kind, source_url=page_url, target=target)
