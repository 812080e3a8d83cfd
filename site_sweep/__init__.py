# site_sweep/__init__.py
"""
SiteSweep package initializer.
Defines the package version and exposes the crawl entry points.
"""
__version__ = "0.1.0"

from site_sweep.crawler.crawler import LevelCrawler, crawl
from site_sweep.crawler.link_extractor import extract_links
from site_sweep.crawler.models import FetchError, InvalidAddressError, PageResult

__all__ = [
    "__version__",
    "crawl",
    "LevelCrawler",
    "extract_links",
    "PageResult",
    "FetchError",
    "InvalidAddressError",
]
