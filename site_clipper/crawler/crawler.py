from __future__ import annotations

import asyncio
import inspect
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Union

from aiohttp import ClientSession
from bs4 import BeautifulSoup

from site_clipper.config import CrawlOptions
from site_clipper.crawler.fetcher import StrategyFetcher
from site_clipper.crawler.frontier import CrawlPolicy, Frontier
from site_clipper.crawler.link_extractor import extract_links
from site_clipper.crawler.models import (
    CrawlFailure,
    CrawlProgress,
    CrawlResult,
    ExtractedContent,
    ExtractedLink,
    ExtractionFailure,
    FetchFailure,
    FrontierEntry,
    PageRecord,
)
from site_clipper.crawler.strategies import strategies_for
from site_clipper.logger import get_logger
from site_clipper.parser.extractor import ContentExtractor, ReadabilityContentExtractor
from site_clipper.parser.markdown import count_words

__all__ = ("RecursiveCrawler", "crawl_recursively", "ProgressCallback")

ProgressCallback = Callable[[CrawlProgress], Union[None, Awaitable[None]]]


@dataclass(slots=True)
class PageSuccess:
    record: PageRecord
    links: List[ExtractedLink] = field(default_factory=list)


PageOutcome = Union[PageSuccess, CrawlFailure]


class RecursiveCrawler:
    """Последовательный обход сайта в ширину с запасными стратегиями запроса.

    Экземпляр владеет своей ``ClientSession`` (или использует переданную) и
    может выполнять несколько ``crawl()`` подряд; состояние обхода создаётся
    заново при каждом вызове.
    """

    def __init__(
        self,
        options: Optional[CrawlOptions] = None,
        *,
        extractor: Optional[ContentExtractor] = None,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.options = options or CrawlOptions()
        self.extractor: ContentExtractor = extractor or ReadabilityContentExtractor(
            include_images=self.options.include_images,
            min_content_length=self.options.min_content_length,
        )
        self.session = session
        self._owns_session = session is None
        self.logger = get_logger("crawler")

    async def __aenter__(self) -> RecursiveCrawler:
        if self.session is None:
            self.session = ClientSession()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self, start_url: str, on_progress: Optional[ProgressCallback] = None) -> CrawlResult:
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with RecursiveCrawler(...)'")
        opts = self.options
        started = time.monotonic()
        fetcher = StrategyFetcher(
            self.session,
            timeout=opts.request_timeout,
            strategies=strategies_for(opts.use_fallback_strategies),
            strategy_delay=opts.strategy_delay,
            extra_headers=opts.extra_headers,
        )
        policy = CrawlPolicy(
            start_url,
            same_domain_only=opts.same_domain_only,
            exclude_patterns=opts.exclude_patterns,
            include_patterns=opts.include_patterns,
        )
        frontier = Frontier(opts.max_depth, policy)
        frontier.push(start_url, 0)
        success: List[PageRecord] = []
        failed: List[CrawlFailure] = []

        self.logger.info("Старт обхода: %s", start_url)
        self.logger.info("Настройки: глубина=%d, максимум страниц=%d", opts.max_depth, opts.max_pages)

        while frontier and len(success) + len(failed) < opts.max_pages:
            entry = frontier.pop()
            reason = frontier.should_skip(entry)
            if reason:
                self.logger.debug("Skip %s (%s)", entry.url, reason)
                continue
            frontier.mark_visited(entry.url)

            if on_progress is not None:
                await _notify(
                    on_progress,
                    CrawlProgress(
                        current_url=entry.url,
                        processed_count=len(success) + len(failed),
                        queue_length=len(frontier),
                        success_count=len(success),
                        failed_count=len(failed),
                        current_depth=entry.depth,
                    ),
                )

            outcome = await self._process(fetcher, entry)
            if isinstance(outcome, PageSuccess):
                success.append(outcome.record)
                self.logger.info("✓ %s (глубина: %d)", outcome.record.title, entry.depth)
                if entry.depth < opts.max_depth:
                    frontier.extend((link.url for link in outcome.links), entry.depth + 1)
            else:
                failed.append(outcome)
                self.logger.info("✗ %s - %s", entry.url, outcome.error)

            if frontier and len(success) + len(failed) < opts.max_pages:
                await asyncio.sleep(opts.delay_between_requests)

        elapsed_ms = int((time.monotonic() - started) * 1000)
        self.logger.info(
            "Завершено: успешно=%d, ошибок=%d, время=%d мс", len(success), len(failed), elapsed_ms
        )
        return CrawlResult(
            success=success,
            failed=failed,
            total_time_ms=elapsed_ms,
            visited_urls=frontier.visited_urls,
        )

    async def _process(self, fetcher: StrategyFetcher, entry: FrontierEntry) -> PageOutcome:
        """Fetch, extract and expand one page; every failure comes back as a CrawlFailure."""
        attempted: List[str] = []
        try:
            fetched = await fetcher.fetch(entry.url)
            attempted = list(fetched.attempted_strategies)
            if isinstance(fetched, FetchFailure):
                return CrawlFailure(entry.url, fetched.error, attempted, entry.depth)

            extracted = self.extractor.extract(fetched.html, fetched.final_url)
            if isinstance(extracted, ExtractionFailure):
                return CrawlFailure(entry.url, extracted.error, attempted, entry.depth)

            links = extract_links(BeautifulSoup(fetched.html, "html.parser"), fetched.final_url)
            return PageSuccess(record=_to_record(extracted, entry.url), links=links)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            self.logger.exception("Unexpected error while processing %s", entry.url)
            return CrawlFailure(entry.url, str(exc) or exc.__class__.__name__, attempted, entry.depth)


def _to_record(extracted: ExtractedContent, url: str) -> PageRecord:
    return PageRecord(
        title=extracted.title,
        content=extracted.content,
        url=url,
        word_count=count_words(extracted.content),
        published_time=extracted.published_time,
        author=extracted.author,
        site_name=extracted.site_name,
    )


async def _notify(callback: ProgressCallback, progress: CrawlProgress) -> None:
    result: Any = callback(progress)
    if inspect.isawaitable(result):
        await result


async def crawl_recursively(
    start_url: str,
    options: Optional[CrawlOptions] = None,
    on_progress: Optional[ProgressCallback] = None,
    *,
    extractor: Optional[ContentExtractor] = None,
) -> CrawlResult:
    """
    Запускает рекурсивный обход в собственной сессии и возвращает CrawlResult.

    Parameters
    ----------
    start_url : str
        Стартовый адрес обхода.
    options : CrawlOptions, optional
        Настройки обхода; по умолчанию ``CrawlOptions()``.
    on_progress : callable, optional
        Вызывается перед загрузкой каждой страницы со снимком CrawlProgress.
    """
    async with RecursiveCrawler(options, extractor=extractor) as crawler:
        return await crawler.crawl(start_url, on_progress)
