# File: site_sweep/engine.py
"""site_sweep.engine: orchestration layer that runs a crawl from a CrawlConfig."""

from __future__ import annotations

import asyncio
from typing import Optional, Set

from site_sweep.config import CrawlConfig, load_config
from site_sweep.crawler.crawler import crawl
from site_sweep.crawler.models import FilterPredicate
from site_sweep.filters import build_filter
from site_sweep.logger import logger

__all__ = ["Engine", "start_crawl"]


async def start_crawl(
    config: CrawlConfig,
    domain: Optional[str] = None,
    depth: Optional[int] = None,
    filter_fn: Optional[FilterPredicate] = None,
    fail_fast: Optional[bool] = None,
) -> Set[str]:
    """Run a crawl where explicit arguments override the values from *config*."""
    target = domain or config.domain
    if not target:
        raise ValueError("no domain given and none configured")
    levels = config.depth if depth is None else depth
    predicate = filter_fn or build_filter(config.filters, domain=target)
    return await crawl(target, levels, predicate, config=config, fail_fast=fail_fast)


class Engine:
    """Facade for the CLI and tests: loads the config and runs a crawl to completion."""

    @staticmethod
    def load_config(path: Optional[str]) -> CrawlConfig:
        return load_config(path)

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config

    def run(
        self,
        domain: Optional[str] = None,
        depth: Optional[int] = None,
        filter_fn: Optional[FilterPredicate] = None,
        scan_timeout: Optional[float] = None,
        fail_fast: Optional[bool] = None,
    ) -> Set[str]:
        """Crawl synchronously, optionally bounded by a whole-crawl timeout.

        *fail_fast* overrides the config; ``False`` skips pages that fail to fetch.
        """
        logger.info("Starting crawl…")
        coro = start_crawl(self.config, domain, depth, filter_fn, fail_fast)
        if scan_timeout:
            coro = asyncio.wait_for(coro, timeout=scan_timeout)
        try:
            return asyncio.run(coro)
        except asyncio.TimeoutError:
            logger.error("Crawl did not finish within %s seconds", scan_timeout)
            raise
        except Exception as exc:
            logger.error("Crawl failed: %s", exc)
            raise
