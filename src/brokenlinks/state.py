"""
Crawl state containers: the visited set and the page frontier.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Optional, Set


class VisitedSet:
    """Absolute URLs that have been verified successfully during one crawl."""

    __slots__ = ("_urls",)

    def __init__(self) -> None:
        self._urls: Set[str] = set()

    def contains(self, url: str) -> bool:
        return url in self._urls

    def mark_visited(self, url: str) -> None:
        # Idempotent; the set only ever grows.
        self._urls.add(url)

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)


class Frontier:
    """
    Pages waiting for full retrieval.

    Last-in-first-out by default, so the most recently discovered page is
    explored next (depth-first). With breadth_first=True pages are taken in
    discovery order instead.
    """

    __slots__ = ("_queue", "breadth_first")

    def __init__(self, breadth_first: bool = False) -> None:
        self._queue: Deque[str] = deque()
        self.breadth_first = breadth_first

    def push(self, url: str) -> None:
        self._queue.append(url)

    def pop(self) -> Optional[str]:
        """Remove and return the next page URL, or None when empty."""
        if not self._queue:
            return None
        return self._queue.popleft() if self.breadth_first else self._queue.pop()

    def is_empty(self) -> bool:
        return not self._queue

    def __len__(self) -> int:
        return len(self._queue)
