# site_sweep/crawler/fetcher.py
"""
Fetcher module: aiohttp-backed page fetcher with timeout and optional retry/backoff.
"""
from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_sweep.config import CrawlConfig
from site_sweep.crawler.models import FetchError, PageResult
from site_sweep.logger import logger

MAX_BACKOFF = 60.0


class Fetcher:
    """Fetches pages over a shared :class:`aiohttp.ClientSession`.

    Every HTTP response, whatever its status, becomes a :class:`PageResult`;
    only transport failures (connection errors, timeouts) raise
    :class:`FetchError`. With ``retry_times == 0`` (the default) a failed
    request is not retried.
    """

    def __init__(self, session: ClientSession, config: Optional[CrawlConfig] = None) -> None:
        self.session = session
        self.config = config or CrawlConfig()

    async def fetch(self, address: str) -> PageResult:
        """Fetch *address* and return its status and body."""
        attempts = 0
        while True:
            try:
                async with self.session.get(address, raise_for_status=False) as resp:
                    body = await resp.text(errors="replace")
                    logger.debug("GET %s -> %s", address, resp.status)
                    return PageResult(url=address, status=resp.status, body=body)
            except (ClientError, asyncio.TimeoutError) as exc:
                if attempts >= self.config.retry_times:
                    logger.error("Fetch failed for %s: %r", address, exc)
                    raise FetchError(address, repr(exc)) from exc
                backoff = self._backoff(attempts)
                attempts += 1
                logger.debug(
                    "Retry %d/%d for %s after %.2f s", attempts, self.config.retry_times, address, backoff
                )
                await asyncio.sleep(backoff)

    def _backoff(self, attempt: int) -> float:
        # exponential, capped
        return min(MAX_BACKOFF, self.config.backoff_base * 2**attempt)


@asynccontextmanager
async def open_fetcher(config: Optional[CrawlConfig] = None) -> AsyncIterator[Fetcher]:
    """Open a :class:`ClientSession` configured from *config* and yield a :class:`Fetcher` over it."""
    cfg = config or CrawlConfig()
    session = ClientSession(
        timeout=ClientTimeout(total=cfg.timeout),
        headers={"User-Agent": cfg.user_agent},
        raise_for_status=False,
    )
    try:
        yield Fetcher(session, cfg)
    finally:
        if not session.closed:
            await session.close()
