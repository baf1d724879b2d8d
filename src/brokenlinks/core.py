"""
Core crawling logic: traversal of in-scope pages and verification of every
link and image they reference.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional

from brokenlinks.config import CrawlConfig
from brokenlinks.errors import MalformedURLError, SeedFetchError
from brokenlinks.extract import Reference, ReferenceKind, extract_references
from brokenlinks.fetch import Fetcher, FetchResult, RateLimiter
from brokenlinks.report import FailureKind, FailureRecord, ReportWriter
from brokenlinks.state import Frontier, VisitedSet
from brokenlinks.urls import in_scope, is_http_url, normalize_url

logger = logging.getLogger("brokenlinks")

Extractor = Callable[[str, str], Iterable[Reference]]


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during crawl for summary output."""
    pages_crawled: int = 0
    urls_checked: int = 0
    references_skipped: int = 0
    duplicates_skipped: int = 0
    broken_links: int = 0
    broken_images: int = 0
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_error(self, status_code: Optional[int]) -> None:
        """Record an error by status code category."""
        if status_code is None:
            self.error_counts["connection_error"] += 1
        else:
            self.error_counts[str(status_code)] += 1

    def record_failure(self, record: FailureRecord, status_code: Optional[int]) -> None:
        if record.kind is FailureKind.BROKEN_IMAGE:
            self.broken_images += 1
        else:
            self.broken_links += 1
        self.record_error(status_code)


@dataclass(slots=True)
class CrawlState:
    """Everything a crawl mutates. Owned by a single crawl() call."""
    frontier: Frontier
    visited: VisitedSet
    stats: CrawlStats = field(default_factory=CrawlStats)


def _fetch_page(
    url: str,
    fetcher: Fetcher,
    limiter: RateLimiter,
    is_seed: bool,
) -> FetchResult:
    logger.debug("Checking URL: %s", url)
    result = fetcher.fetch_full(url)
    limiter.pause()

    if not result.ok:
        if is_seed:
            raise SeedFetchError(url, result.status_line)
        # The page passed its existence check earlier; carry on with whatever came back.
        logger.debug("\tFull fetch of %s failed (%s)", url, result.status_line)
    return result


def _verify_reference(
    ref: Reference,
    state: CrawlState,
    config: CrawlConfig,
    fetcher: Fetcher,
    limiter: RateLimiter,
    report: ReportWriter,
) -> None:
    """Check one reference; queue it, mark it visited or report it."""
    stats = state.stats

    try:
        target = normalize_url(ref.target, ref.source_url)
    except MalformedURLError as e:
        logger.debug("\tSkipping malformed %s URL: %s (%s)", ref.kind.value, ref.target, e.reason)
        stats.references_skipped += 1
        return

    # Only check http(s) URLs - ignore mailto, javascript etc.
    if not is_http_url(target):
        logger.debug("\tSkipping %s URL: %s", ref.kind.value, target)
        stats.references_skipped += 1
        return

    if target in state.visited:
        stats.duplicates_skipped += 1
        return

    logger.debug("\tChecking %s URL: %s", ref.kind.value, target)

    # HEAD only, the body does not matter at this point
    result = fetcher.check_exists(target)
    limiter.pause()
    stats.urls_checked += 1

    if not result.ok:
        # Failed URLs stay unvisited, so another page referencing them re-checks them.
        record = FailureRecord(
            status=result.status_line,
            kind=FailureKind.for_reference(ref.kind),
            source_url=ref.source_url,
            destination_url=target,
        )
        report.write(record)
        stats.record_failure(record, result.status_code)
        logger.debug("\t%s: %s (%s)", record.kind.value, target, record.status)
        return

    state.visited.mark_visited(target)

    if ref.kind is ReferenceKind.LINK and in_scope(target, config.base_url) and result.is_html:
        state.frontier.push(target)
        logger.debug("\tQueued link URL: %s", target)


def crawl(
    config: CrawlConfig,
    report: ReportWriter,
    fetcher: Optional[Fetcher] = None,
    limiter: Optional[RateLimiter] = None,
    extractor: Extractor = extract_references,
) -> CrawlStats:
    """
    Crawl a site from config.base_url and report every broken link and image.

    Pages are fetched one at a time. Each reference on a page is normalized,
    filtered to http(s), deduplicated against the visited set and checked
    with a HEAD request. Successful in-scope HTML links are queued for full
    retrieval; failures are written to the report.

    Args:
        config: Crawl settings.
        report: Destination for failure records. Not closed here.
        fetcher: HTTP collaborator; a requests-based Fetcher by default.
        limiter: Pause applied after every request; config.request_gap by default.
        extractor: Callable yielding the references of a page body.

    Returns:
        Crawl statistics.

    Raises:
        MalformedURLError: config.base_url is not a valid http(s) URL.
        SeedFetchError: the base URL itself could not be fetched.
        ReportSinkError: the report could not be written.
    """
    seed_normalized = normalize_url(config.base_url, config.base_url)
    if not is_http_url(seed_normalized):
        raise MalformedURLError(config.base_url, "base URL must use http or https")

    own_fetcher = fetcher is None
    if fetcher is None:
        fetcher = Fetcher(timeout_s=config.timeout_s, user_agent=config.user_agent)
    if limiter is None:
        limiter = RateLimiter(config.request_gap)

    state = CrawlState(frontier=Frontier(breadth_first=config.breadth_first), visited=VisitedSet())
    state.visited.mark_visited(seed_normalized)
    state.frontier.push(config.base_url)

    logger.info("Starting crawl from: %s", config.base_url)

    previous_level = logger.level
    if config.debug:
        logger.setLevel(logging.DEBUG)

    is_seed = True
    try:
        while not state.frontier.is_empty():
            current_url = state.frontier.pop()

            page = _fetch_page(current_url, fetcher, limiter, is_seed)
            is_seed = False
            state.stats.pages_crawled += 1

            for ref in extractor(page.body, current_url):
                _verify_reference(ref, state, config, fetcher, limiter, report)
    finally:
        logger.setLevel(previous_level)
        if own_fetcher:
            fetcher.close()

    logger.info(
        "Crawl finished: %d pages, %d URLs checked, %d broken",
        state.stats.pages_crawled,
        state.stats.urls_checked,
        state.stats.broken_links + state.stats.broken_images,
    )
    return state.stats
