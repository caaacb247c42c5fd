"""
Exception types raised inside the fetch and extraction stages.

The crawler converts them into :class:`~site_clipper.crawler.models.CrawlFailure`
records; the single-page clipper lets them reach the caller.
"""
from __future__ import annotations

from typing import Sequence


class ClipperError(Exception):
    """Base class for all SiteClipper errors."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url
        self.message = message


class FetchError(ClipperError):
    """Every fetch strategy failed for *url*."""

    def __init__(self, url: str, message: str, attempted_strategies: Sequence[str] = ()) -> None:
        super().__init__(url, message)
        self.attempted_strategies = list(attempted_strategies)


class ExtractionError(ClipperError):
    """The page was fetched but no usable content could be extracted."""


__all__ = ["ClipperError", "FetchError", "ExtractionError"]
