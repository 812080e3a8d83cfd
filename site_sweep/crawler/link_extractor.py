# site_sweep/crawler/link_extractor.py
"""
Link extraction for SiteSweep: turns a fetched page into a set of canonical link targets.
"""
from __future__ import annotations

from typing import Set

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_sweep.crawler.models import FilterPredicate, PageResult
from site_sweep.logger import logger
from site_sweep.utils import canonicalize_scheme


def extract_links(page: PageResult, filter_fn: FilterPredicate) -> Set[str]:
    """
    Collect every stripped ``<a href>`` of *page* accepted by *filter_fn*.

    Survivors have their scheme canonicalized to ``http``. A page whose
    status is not 200 contributes nothing: the status is logged and an
    empty set is returned instead of raising.
    """
    if not page.ok:
        logger.warning("Website returned an error: %s (%s)", page.status, page.url)
        return set()

    soup = BeautifulSoup(page.body, "html.parser")
    links: Set[str] = set()
    for tag in soup.find_all("a"):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if not isinstance(href, str):
            continue
        # browsers ignore surrounding ASCII whitespace in href
        href = href.strip()
        if not filter_fn(href):
            continue
        links.add(canonicalize_scheme(href))
    return links
