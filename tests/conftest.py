# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable
from typing import Dict, List, Union

from aiohttp import web

from site_sweep.crawler.models import FetchError, PageResult


def anchors(*hrefs: str) -> str:
    """Build a small HTML page linking to *hrefs*."""
    body = "".join(f'<a href="{href}">{href}</a>' for href in hrefs)
    return f"<html><body>{body}</body></html>"


class FakeFetcher:
    """In-memory page fetcher recording every requested address.

    Unknown addresses answer 404; addresses listed in *failures* raise FetchError.
    """

    def __init__(
        self,
        pages: Dict[str, Union[str, PageResult]],
        failures: Iterable[str] = (),
    ) -> None:
        self.pages = pages
        self.failures = set(failures)
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, address: str) -> PageResult:
        self.calls.append(address)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0.01)
        finally:
            self.in_flight -= 1
        if address in self.failures:
            raise FetchError(address, "connection refused")
        entry = self.pages.get(address)
        if entry is None:
            return PageResult(url=address, status=404, body="")
        if isinstance(entry, PageResult):
            return entry
        return PageResult(url=address, status=200, body=entry)


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield its ``host:port`` domain, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"localhost:{port}"
    finally:
        await runner.cleanup()
