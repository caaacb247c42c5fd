"""
Fetcher module: issues GET requests through an ordered list of header
strategies until one returns an HTML page.
"""
from __future__ import annotations

import asyncio
from typing import Mapping, Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_clipper.crawler.models import FetchFailure, FetchResult, FetchSuccess
from site_clipper.crawler.strategies import FetchStrategy, strategies_for
from site_clipper.errors import FetchError
from site_clipper.logger import get_logger

HTML_CONTENT_TYPES: Sequence[str] = ("text/html", "application/xhtml")


class StrategyFetcher:
    """Fetch a URL, falling back through request strategies on failure."""

    def __init__(
        self,
        session: ClientSession,
        *,
        timeout: float,
        strategies: Sequence[FetchStrategy] = strategies_for(True),
        strategy_delay: float = 0.5,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        if not strategies:
            raise ValueError("at least one fetch strategy is required")
        self.session = session
        self.timeout = timeout
        self.strategies = tuple(strategies)
        self.strategy_delay = strategy_delay
        self.extra_headers = dict(extra_headers or {})
        self.logger = get_logger("fetcher")

    async def fetch(self, url: str) -> FetchResult:
        """
        Try every strategy in order.

        Returns FetchSuccess for the first strategy that yields a 2xx HTML
        response, or FetchFailure naming every strategy attempted.
        """
        attempted: list[str] = []
        last_error = "no strategy attempted"
        for index, strategy in enumerate(self.strategies):
            attempted.append(strategy.name)
            try:
                html, final_url = await self.fetch_once(url, strategy)
            except (FetchError, ClientError, asyncio.TimeoutError) as exc:
                last_error = _describe(exc, self.timeout)
                self.logger.debug("Strategy '%s' failed for %s: %s", strategy.name, url, last_error)
                if index < len(self.strategies) - 1:
                    await asyncio.sleep(self.strategy_delay)
                continue
            return FetchSuccess(
                html=html,
                final_url=final_url,
                strategy=strategy.name,
                attempted_strategies=list(attempted),
            )
        return FetchFailure(error=last_error, attempted_strategies=attempted)

    async def fetch_once(self, url: str, strategy: FetchStrategy) -> tuple[str, str]:
        """
        One GET with *strategy*'s headers.

        Returns ``(html, final_url)``; raises FetchError for a non-2xx status or
        a non-HTML content type. Transport errors propagate as aiohttp raises them.
        """
        async with self.session.get(
            url,
            headers=strategy.merged_headers(self.extra_headers),
            timeout=ClientTimeout(total=self.timeout),
            allow_redirects=True,
            raise_for_status=False,
        ) as resp:
            if not 200 <= resp.status < 300:
                raise FetchError(url, f"HTTP {resp.status}: {resp.reason or ''}".strip(), [strategy.name])
            ctype = resp.headers.get("Content-Type", "").lower()
            if not any(t in ctype for t in HTML_CONTENT_TYPES):
                raise FetchError(url, f"not HTML: {ctype or 'unknown content type'}", [strategy.name])
            html = await resp.text(errors="replace")
            return html, str(resp.url)


def _describe(exc: BaseException, timeout: float) -> str:
    if isinstance(exc, FetchError):
        return exc.message
    if isinstance(exc, asyncio.TimeoutError):
        return f"timed out after {timeout:g}s"
    return str(exc) or exc.__class__.__name__


__all__ = ["StrategyFetcher", "HTML_CONTENT_TYPES"]
