"""
Клиппер одной страницы: загрузка, выделение основного текста и нормализация в markdown.

Использует тот же экстрактор и ту же функцию ``markup_to_text``, что и
рекурсивный обход, но ошибки не превращает в записи, а пробрасывает вызывающему.
"""
from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from typing import Dict, Iterable, List, Optional, Tuple

from aiohttp import ClientError, ClientSession

from site_clipper.crawler.fetcher import StrategyFetcher
from site_clipper.crawler.models import ExtractionFailure, PageRecord
from site_clipper.crawler.strategies import DEFAULT_STRATEGY
from site_clipper.errors import ClipperError, ExtractionError, FetchError
from site_clipper.logger import get_logger
from site_clipper.parser.extractor import ContentExtractor, ReadabilityContentExtractor
from site_clipper.parser.markdown import count_words

__all__ = ["clip_page", "clip_pages"]

logger = get_logger("clipper")


async def clip_page(
    url: str,
    *,
    timeout: float = 10.0,
    include_images: bool = False,
    session: Optional[ClientSession] = None,
    extractor: Optional[ContentExtractor] = None,
) -> PageRecord:
    """
    Загружает одну страницу профилем запроса по умолчанию и возвращает PageRecord.

    Raises
    ------
    FetchError
        Ошибка сети, таймаут, статус не 2xx или ответ не HTML.
    ExtractionError
        Не найден основной контент или он короче минимальной длины.
    """
    logger.info("Клиппинг: %s", url)
    extractor = extractor or ReadabilityContentExtractor(include_images=include_images)

    async with AsyncExitStack() as stack:
        if session is None:
            session = await stack.enter_async_context(ClientSession())
        fetcher = StrategyFetcher(session, timeout=timeout, strategies=(DEFAULT_STRATEGY,))
        try:
            html, final_url = await fetcher.fetch_once(url, DEFAULT_STRATEGY)
        except asyncio.TimeoutError as exc:
            raise FetchError(url, f"timed out after {timeout:g}s", [DEFAULT_STRATEGY.name]) from exc
        except ClientError as exc:
            raise FetchError(url, str(exc) or exc.__class__.__name__, [DEFAULT_STRATEGY.name]) from exc

    extracted = extractor.extract(html, final_url)
    if isinstance(extracted, ExtractionFailure):
        raise ExtractionError(url, extracted.error)

    record = PageRecord(
        title=extracted.title,
        content=extracted.content,
        url=url,
        word_count=count_words(extracted.content),
        published_time=extracted.published_time,
        author=extracted.author,
        site_name=extracted.site_name,
    )
    logger.info("Готово: %s (%d слов)", record.title, record.word_count)
    return record


async def clip_pages(
    urls: Iterable[str],
    *,
    delay: float = 1.0,
    timeout: float = 10.0,
    include_images: bool = False,
    extractor: Optional[ContentExtractor] = None,
) -> Tuple[List[PageRecord], List[Dict[str, str]]]:
    """Последовательно клиппирует адреса; ошибки собираются как ``{"url", "error"}``."""
    success: List[PageRecord] = []
    failed: List[Dict[str, str]] = []
    pending = list(urls)

    async with ClientSession() as session:
        for index, url in enumerate(pending):
            try:
                success.append(
                    await clip_page(
                        url,
                        timeout=timeout,
                        include_images=include_images,
                        session=session,
                        extractor=extractor,
                    )
                )
            except ClipperError as exc:
                logger.error("Ошибка клиппинга: %s - %s", url, exc.message)
                failed.append({"url": url, "error": exc.message})
            if index < len(pending) - 1:
                await asyncio.sleep(delay)

    return success, failed
