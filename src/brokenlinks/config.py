"""
Crawl configuration.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from brokenlinks.fetch import DEFAULT_TIMEOUT_S, DEFAULT_USER_AGENT

DEFAULT_REQUEST_GAP_S = 1.0


@dataclass(slots=True)
class CrawlConfig:
    """Settings for a single crawl run."""
    base_url: str
    request_gap: float = DEFAULT_REQUEST_GAP_S
    output_file: Optional[str] = None
    debug: bool = False
    timeout_s: float = DEFAULT_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT
    breadth_first: bool = False

    def __post_init__(self) -> None:
        self.base_url = (self.base_url or "").strip()
        if not self.base_url:
            raise ValueError("base_url is required")
        if self.request_gap < 0:
            raise ValueError(f"request_gap must be >= 0, got {self.request_gap}")
        if self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be > 0, got {self.timeout_s}")
