"""
Command-line interface for the link checker.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from brokenlinks.config import DEFAULT_REQUEST_GAP_S, CrawlConfig
from brokenlinks.core import crawl, CrawlStats
from brokenlinks.errors import MalformedURLError, ReportSinkError, SeedFetchError
from brokenlinks.fetch import DEFAULT_TIMEOUT_S, DEFAULT_USER_AGENT
from brokenlinks.report import open_report

logger = logging.getLogger("brokenlinks.cli")

EXIT_OK = 0
EXIT_SINK_ERROR = 1
EXIT_CRAWL_ERROR = 2


def print_summary(stats: CrawlStats) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Pages crawled:          {stats.pages_crawled}\n")
    sys.stderr.write(f"URLs checked:           {stats.urls_checked}\n")
    sys.stderr.write(f"Duplicates skipped:     {stats.duplicates_skipped}\n")
    sys.stderr.write(f"References skipped:     {stats.references_skipped}\n")
    sys.stderr.write(f"Broken links:           {stats.broken_links}\n")
    sys.stderr.write(f"Broken images:          {stats.broken_images}\n\n")

    if stats.error_counts:
        sys.stderr.write("Errors by type:\n")
        for error_type, count in sorted(stats.error_counts.items()):
            label = "Connection errors" if error_type == "connection_error" else f"HTTP {error_type}"
            sys.stderr.write(f"  {label}: {count}\n")
    else:
        sys.stderr.write("No broken links found.\n")

    sys.stderr.write("\n")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="brokenlinks",
        description="Crawl a website and report broken links and images as CSV.",
    )
    parser.add_argument("base_url", help="Base URL to crawl (e.g. https://example.com); also limits which pages are followed")
    parser.add_argument(
        "--gap",
        type=float,
        default=DEFAULT_REQUEST_GAP_S,
        help=f"Seconds to wait after every request (default: {DEFAULT_REQUEST_GAP_S:g})",
    )
    parser.add_argument("--out", help="Output CSV file path, or '-' for stdout (default: stdout)")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_S, help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT_S:g})")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--breadth-first", action="store_true", help="Visit pages in discovery order instead of depth-first")
    parser.add_argument("--debug", action="store_true", help="Trace every checked, queued and skipped URL")
    parser.add_argument("--verbose", action="store_true", help="Print a summary when the crawl finishes")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the link checker CLI."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    try:
        config = CrawlConfig(
            base_url=args.base_url,
            request_gap=args.gap,
            output_file=None if args.out == "-" else args.out,
            debug=args.debug,
            timeout_s=args.timeout,
            user_agent=args.user_agent,
            breadth_first=args.breadth_first,
        )
    except ValueError as e:
        logger.error("%s", e)
        return EXIT_CRAWL_ERROR

    try:
        with open_report(config.output_file) as report:
            stats = crawl(config, report)
    except ReportSinkError as e:
        logger.error("%s", e)
        return EXIT_SINK_ERROR
    except (MalformedURLError, SeedFetchError) as e:
        logger.error("%s", e)
        return EXIT_CRAWL_ERROR

    if args.verbose:
        print_summary(stats)
        if config.output_file:
            sys.stderr.write(f"Results written to: {config.output_file}\n")

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
