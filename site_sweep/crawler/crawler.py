from __future__ import annotations

import asyncio
import time
from typing import Callable, FrozenSet, Iterable, List, Optional, Set

from site_sweep.config import CrawlConfig
from site_sweep.crawler.fetcher import open_fetcher
from site_sweep.crawler.link_extractor import extract_links
from site_sweep.crawler.models import (
    FetchError,
    FilterPredicate,
    InvalidAddressError,
    LevelReport,
    PageFetcher,
)
from site_sweep.filters import accept_all
from site_sweep.logger import logger
from site_sweep.utils import is_well_formed, seed_address

__all__ = ("LevelCrawler", "crawl", "DEFAULT_DEPTH")

DEFAULT_DEPTH = 5

LevelHook = Callable[[LevelReport], None]


def _log_level(report: LevelReport) -> None:
    logger.info(
        "Level %d: fetched %d pages, %d links, %d new, %d visited",
        report.level, report.fetched, report.discovered, report.new, report.visited,
    )


def _checked_seed(domain: str) -> str:
    """Return the seed address for *domain*, raising InvalidAddressError when malformed."""
    url = seed_address(domain)
    if not is_well_formed(url):
        raise InvalidAddressError(url)
    return url


class LevelCrawler:
    """Breadth-first crawler that advances one whole level at a time.

    Each level fetches the entire frontier concurrently and waits for every
    fetch before merging. The visited set and the frontier are only touched
    by :meth:`crawl` itself, between those barriers.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        *,
        fail_fast: bool = True,
        on_level: Optional[LevelHook] = None,
    ) -> None:
        self.fetcher = fetcher
        self.fail_fast = fail_fast
        self.on_level: LevelHook = on_level or _log_level

    async def crawl(
        self,
        domain: str,
        depth: int = DEFAULT_DEPTH,
        filter_fn: FilterPredicate = accept_all,
    ) -> Set[str]:
        """Crawl *domain* for *depth* levels and return every address discovered."""
        url = _checked_seed(domain)
        if depth < 0:
            raise ValueError(f"depth must be >= 0, got {depth}")

        if depth == 0:
            return {url}

        logger.info("Crawl start: %s (depth=%d)", url, depth)
        start = time.monotonic()

        # the seed fetch is fatal in both modes
        visited: Set[str] = set(await self._links_of(url, filter_fn))
        # the seed was fetched already; it may be discovered but never re-fetched
        frontier: Set[str] = visited - {url}
        self.on_level(LevelReport(0, 1, len(visited), len(frontier), len(visited)))

        for level in range(1, depth):
            if not frontier:
                logger.debug("Frontier empty after level %d, stopping", level - 1)
                break
            results = await self._fetch_level(frontier, filter_fn)
            combined: Set[str] = set().union(*results)
            frontier = combined - visited - {url}
            visited |= combined
            self.on_level(LevelReport(level, len(results), len(combined), len(frontier), len(visited)))

        logger.info("Crawl done: %d addresses in %.2f s", len(visited), time.monotonic() - start)
        return visited

    async def _links_of(self, address: str, filter_fn: FilterPredicate) -> FrozenSet[str]:
        page = await self.fetcher.fetch(address)
        return frozenset(extract_links(page, filter_fn))

    async def _fetch_level(
        self, frontier: Iterable[str], filter_fn: FilterPredicate
    ) -> List[FrozenSet[str]]:
        tasks = [asyncio.ensure_future(self._links_of(address, filter_fn)) for address in frontier]
        if self.fail_fast:
            try:
                return list(await asyncio.gather(*tasks))
            except BaseException:
                # an aborted level leaves no fetch running behind it
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise

        results: List[FrozenSet[str]] = []
        for outcome in await asyncio.gather(*tasks, return_exceptions=True):
            if isinstance(outcome, FetchError):
                logger.warning("Skipping page: %s", outcome)
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            results.append(outcome)
        return results


async def crawl(
    domain: str,
    depth: int = DEFAULT_DEPTH,
    filter_fn: FilterPredicate = accept_all,
    *,
    fetcher: Optional[PageFetcher] = None,
    config: Optional[CrawlConfig] = None,
    fail_fast: Optional[bool] = None,
) -> Set[str]:
    """
    Crawl *domain* and return the set of discovered addresses.

    Without an injected *fetcher* an aiohttp session is opened from *config*
    for the duration of the crawl. *fail_fast* defaults to the config value.
    """
    cfg = config or CrawlConfig()
    strict = cfg.fail_fast if fail_fast is None else fail_fast
    if fetcher is not None:
        return await LevelCrawler(fetcher, fail_fast=strict).crawl(domain, depth, filter_fn)

    # validate before opening a session
    _checked_seed(domain)
    async with open_fetcher(cfg) as http_fetcher:
        return await LevelCrawler(http_fetcher, fail_fast=strict).crawl(domain, depth, filter_fn)
