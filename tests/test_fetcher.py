import asyncio

import pytest
from aiohttp import ClientSession, web

from site_clipper.crawler.fetcher import StrategyFetcher
from site_clipper.crawler.models import FetchFailure, FetchSuccess
from site_clipper.crawler.strategies import STRATEGIES, USER_AGENTS, FetchStrategy, strategies_for

from .conftest import article_html


def test_strategies_in_documented_order():
    assert [s.name for s in STRATEGIES] == ["default", "chrome-mac", "firefox", "mobile", "googlebot"]
    assert [s.name for s in strategies_for(False)] == ["default"]
    assert STRATEGIES[4].headers["User-Agent"] == USER_AGENTS["googlebot"]


def test_extra_headers_take_precedence():
    merged = STRATEGIES[0].merged_headers({"User-Agent": "custom/1.0", "X-Token": "t"})
    assert merged["User-Agent"] == "custom/1.0"
    assert merged["X-Token"] == "t"
    assert "Accept-Language" in merged


def test_empty_strategy_list_rejected():
    with pytest.raises(ValueError):
        StrategyFetcher(None, timeout=1, strategies=())  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_redirect_reports_final_url(site):
    async def moved(_: web.Request) -> web.Response:
        raise web.HTTPFound("/new")

    site.route("/old", moved)
    site.page("/new", article_html("New"))
    base = await site.start()

    async with ClientSession() as session:
        fetcher = StrategyFetcher(session, timeout=2, strategy_delay=0)
        result = await fetcher.fetch(f"{base}/old")

    assert isinstance(result, FetchSuccess)
    assert result.final_url == f"{base}/new"
    assert result.strategy == "default"
    assert result.attempted_strategies == ["default"]
    assert "<h1>New</h1>" in result.html


@pytest.mark.asyncio
async def test_extra_headers_sent(site):
    site.page("/", article_html("Home"))
    base = await site.start()

    async with ClientSession() as session:
        fetcher = StrategyFetcher(session, timeout=2, extra_headers={"User-Agent": "clipper-test/1.0"})
        result = await fetcher.fetch(f"{base}/")

    assert isinstance(result, FetchSuccess)
    assert site.user_agents["/"] == ["clipper-test/1.0"]


@pytest.mark.asyncio
async def test_falls_back_until_a_strategy_succeeds(site):
    async def picky(request: web.Request) -> web.Response:
        if "Mobile" not in request.headers.get("User-Agent", ""):
            return web.Response(status=403, text="forbidden")
        return web.Response(text=article_html("Mobile only"), content_type="text/html")

    site.route("/", picky)
    base = await site.start()

    async with ClientSession() as session:
        fetcher = StrategyFetcher(session, timeout=2, strategy_delay=0)
        result = await fetcher.fetch(f"{base}/")

    assert isinstance(result, FetchSuccess)
    assert result.strategy == "mobile"
    assert result.attempted_strategies == ["default", "chrome-mac", "firefox", "mobile"]
    assert site.hits["/"] == 4


@pytest.mark.asyncio
async def test_failure_carries_last_error_and_all_attempts(site):
    site.page("/data", '{"a": 1}', content_type="application/json")
    base = await site.start()

    async with ClientSession() as session:
        fetcher = StrategyFetcher(session, timeout=2, strategy_delay=0)
        result = await fetcher.fetch(f"{base}/data")

    assert isinstance(result, FetchFailure)
    assert result.error.startswith("not HTML: application/json")
    assert result.attempted_strategies == [s.name for s in STRATEGIES]


@pytest.mark.asyncio
async def test_no_delay_after_last_strategy(site):
    site.page("/", "gone", status=410)
    base = await site.start()
    strategies = [FetchStrategy("one", {}), FetchStrategy("two", {})]

    async with ClientSession() as session:
        fetcher = StrategyFetcher(session, timeout=2, strategies=strategies, strategy_delay=0.3)
        loop = asyncio.get_running_loop()
        started = loop.time()
        result = await fetcher.fetch(f"{base}/")
        elapsed = loop.time() - started

    assert isinstance(result, FetchFailure)
    assert result.error.startswith("HTTP 410")
    assert result.attempted_strategies == ["one", "two"]
    # one pause between the two attempts, none after the second
    assert 0.3 <= elapsed < 0.6
