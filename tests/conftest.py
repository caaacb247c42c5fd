# File: tests/conftest.py
from __future__ import annotations

from collections import Counter, defaultdict
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

import pytest
import pytest_asyncio
from aiohttp import web

from site_clipper.config import CrawlOptions

#: long enough (with the heading) to pass the 100 character content gate
PARAGRAPH = (
    "Site clipper test content, written long enough to pass the minimum length gate, "
    "with several commas, sentences and plain words for the density scorer."
)


def article_html(
    title: str,
    links: Iterable[str] = (),
    *,
    paragraphs: int = 2,
    head: str = "",
) -> str:
    """Return a small but realistic article page linking to *links*."""
    body = "".join(f"<p>{PARAGRAPH}</p>" for _ in range(paragraphs))
    anchors = "".join(f'<li><a href="{href}">{href}</a></li>' for href in links)
    return (
        f"<html><head><title>{title}</title>{head}</head><body>"
        f'<nav><a href="/">Home</a></nav>'
        f"<article><h1>{title}</h1>{body}</article>"
        f'<ul class="links">{anchors}</ul>'
        f"</body></html>"
    )


class FakeSite:
    """aiohttp test application that records every hit per path."""

    def __init__(self, port: int) -> None:
        self.port = port
        self.app = web.Application()
        self.hits: Counter[str] = Counter()
        self.user_agents: Dict[str, List[str]] = defaultdict(list)
        self._runner: Optional[web.AppRunner] = None

    @property
    def base(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    def route(self, path: str, handler: Callable[[web.Request], Awaitable[web.StreamResponse]]) -> None:
        async def counted(request: web.Request) -> web.StreamResponse:
            self.hits[path] += 1
            self.user_agents[path].append(request.headers.get("User-Agent", ""))
            return await handler(request)

        self.app.router.add_get(path, counted)

    def page(self, path: str, text: str, *, status: int = 200, content_type: str = "text/html") -> None:
        async def handler(_: web.Request) -> web.Response:
            return web.Response(text=text, status=status, content_type=content_type)

        self.route(path, handler)

    async def start(self) -> str:
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        # no host: listen on every loopback family so "localhost" resolves too
        site = web.TCPSite(self._runner, None, self.port)
        await site.start()
        return self.base

    async def close(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()


@pytest_asyncio.fixture
async def site(unused_tcp_port: int):
    fake = FakeSite(unused_tcp_port)
    yield fake
    await fake.close()


@pytest.fixture()
def make_options() -> Callable[..., CrawlOptions]:
    """CrawlOptions factory with the fixed delays turned off so tests stay quick."""

    def factory(**overrides) -> CrawlOptions:
        params = {"delay_between_requests": 0, "strategy_delay": 0, "request_timeout": 2.0}
        params.update(overrides)
        return CrawlOptions(**params)

    return factory
