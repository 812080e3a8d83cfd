# File: tests/test_fetcher.py
from __future__ import annotations

import asyncio

import pytest
from aiohttp import ClientConnectionError, web

from site_sweep.config import CrawlConfig
from site_sweep.crawler.fetcher import Fetcher, open_fetcher
from site_sweep.crawler.models import FetchError, PageFetcher

from conftest import serve_app


@pytest.mark.asyncio()
async def test_fetch_returns_status_and_body(unused_tcp_port: int):
    app = web.Application()
    seen_agents = []

    async def root(request):
        seen_agents.append(request.headers.get("User-Agent"))
        return web.Response(text="<a href='/x'>x</a>", content_type="text/html")

    app.router.add_get("/", root)

    async for domain in serve_app(app, unused_tcp_port):
        async with open_fetcher(CrawlConfig(user_agent="TestAgent/1.0")) as fetcher:
            assert isinstance(fetcher, PageFetcher)
            page = await fetcher.fetch(f"http://{domain}")

    assert page.status == 200
    assert page.ok
    assert "href='/x'" in page.body
    assert page.url == f"http://{domain}"
    assert seen_agents == ["TestAgent/1.0"]


@pytest.mark.asyncio()
async def test_error_status_is_not_an_exception(unused_tcp_port: int):
    app = web.Application()

    async def boom(_):
        return web.Response(status=500, text="oops")

    app.router.add_get("/boom", boom)

    async for domain in serve_app(app, unused_tcp_port):
        async with open_fetcher() as fetcher:
            page = await fetcher.fetch(f"http://{domain}/boom")
            missing = await fetcher.fetch(f"http://{domain}/missing")

    assert page.status == 500
    assert not page.ok
    assert missing.status == 404


@pytest.mark.asyncio()
async def test_connection_error_raises_fetch_error():
    async with open_fetcher(CrawlConfig(timeout=2.0)) as fetcher:
        with pytest.raises(FetchError) as info:
            await fetcher.fetch("http://localhost:1/")
    assert info.value.address == "http://localhost:1/"
    assert info.value.__cause__ is not None


@pytest.mark.asyncio()
async def test_relative_address_raises_fetch_error():
    async with open_fetcher() as fetcher:
        with pytest.raises(FetchError):
            await fetcher.fetch("/relative")


@pytest.mark.asyncio()
async def test_timeout_raises_fetch_error(unused_tcp_port: int):
    app = web.Application()

    async def slow(_):
        await asyncio.sleep(2)
        return web.Response(text="late")

    app.router.add_get("/", slow)

    async for domain in serve_app(app, unused_tcp_port):
        async with open_fetcher(CrawlConfig(timeout=0.2)) as fetcher:
            with pytest.raises(FetchError):
                await fetcher.fetch(f"http://{domain}")


class FlakyResponse:
    status = 200

    async def text(self, errors="strict"):
        return "<p>ok</p>"

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FlakySession:
    """Stands in for ClientSession: the first *failures* requests break."""

    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0

    def get(self, url, **kwargs):
        self.calls += 1
        if self.calls <= self.failures:
            raise ClientConnectionError("reset")
        return FlakyResponse()


@pytest.mark.asyncio()
async def test_retry_recovers_after_transport_errors():
    session = FlakySession(failures=2)
    fetcher = Fetcher(session, CrawlConfig(retry_times=3, backoff_base=0))
    page = await fetcher.fetch("http://example.com")

    assert page.status == 200
    assert page.body == "<p>ok</p>"
    assert session.calls == 3


@pytest.mark.asyncio()
async def test_retry_gives_up_after_retry_times():
    session = FlakySession(failures=5)
    fetcher = Fetcher(session, CrawlConfig(retry_times=2, backoff_base=0))
    with pytest.raises(FetchError):
        await fetcher.fetch("http://example.com")
    assert session.calls == 3


def test_backoff_is_exponential_and_capped():
    fetcher = Fetcher(FlakySession(0), CrawlConfig(backoff_base=0.5))
    assert [fetcher._backoff(n) for n in range(3)] == [0.5, 1.0, 2.0]
    assert fetcher._backoff(20) == 60.0


@pytest.mark.asyncio()
async def test_no_retry_by_default():
    class DeadSession:
        calls = 0

        def get(self, url, **kwargs):
            DeadSession.calls += 1
            raise ClientConnectionError("down")

    with pytest.raises(FetchError):
        await Fetcher(DeadSession()).fetch("http://example.com")
    assert DeadSession.calls == 1
