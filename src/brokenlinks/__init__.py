"""
Link checker that crawls a website from a base URL and reports every
hyperlink and image that fails to load, as CSV.
"""
__version__ = "1.0.0"

from brokenlinks.config import CrawlConfig
from brokenlinks.core import crawl, CrawlStats
from brokenlinks.report import FailureRecord, open_report

__all__ = ["crawl", "CrawlConfig", "CrawlStats", "FailureRecord", "open_report"]
