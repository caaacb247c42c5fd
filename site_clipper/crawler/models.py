"""
Data models for the SiteClipper crawler.

Stage results are tagged unions (``FetchResult``, ``ExtractionResult``) so the
orchestrator can branch on the outcome instead of catching exceptions.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True, slots=True)
class PageRecord:
    """Normalized content of one successfully crawled page."""

    title: str
    content: str
    url: str
    word_count: int
    published_time: Optional[str] = None
    author: Optional[str] = None
    site_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class CrawlFailure:
    """A page that could not be fetched or yielded no usable content."""

    url: str
    error: str
    attempted_strategies: List[str] = field(default_factory=list)
    depth: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class FrontierEntry:
    url: str
    depth: int


@dataclass(frozen=True, slots=True)
class ExtractedLink:
    """Outbound link found on a page.

    ``depth`` is always ``0`` here; the crawler assigns the real depth when it
    enqueues the link.
    """

    url: str
    text: str
    depth: int = 0


@dataclass(frozen=True, slots=True)
class CrawlProgress:
    """Snapshot passed to the ``on_progress`` observer before each page is fetched."""

    current_url: str
    processed_count: int
    queue_length: int
    success_count: int
    failed_count: int
    current_depth: int


@dataclass(slots=True)
class CrawlResult:
    """Aggregate outcome of one recursive crawl."""

    success: List[PageRecord] = field(default_factory=list)
    failed: List[CrawlFailure] = field(default_factory=list)
    total_time_ms: int = 0
    visited_urls: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": [page.to_dict() for page in self.success],
            "failed": [failure.to_dict() for failure in self.failed],
            "total_time_ms": self.total_time_ms,
            "visited_urls": list(self.visited_urls),
        }


# --------------------------------------------------------------------------- #
# Stage results                                                               #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class FetchSuccess:
    html: str
    final_url: str
    strategy: str
    attempted_strategies: List[str]


@dataclass(frozen=True, slots=True)
class FetchFailure:
    error: str
    attempted_strategies: List[str]


FetchResult = Union[FetchSuccess, FetchFailure]


@dataclass(frozen=True, slots=True)
class ExtractedContent:
    """Main content of a page after isolation and markdown normalization."""

    title: str
    content: str
    author: Optional[str] = None
    published_time: Optional[str] = None
    site_name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ExtractionFailure:
    error: str


ExtractionResult = Union[ExtractedContent, ExtractionFailure]


__all__ = [
    "PageRecord",
    "CrawlFailure",
    "FrontierEntry",
    "ExtractedLink",
    "CrawlProgress",
    "CrawlResult",
    "FetchSuccess",
    "FetchFailure",
    "FetchResult",
    "ExtractedContent",
    "ExtractionFailure",
    "ExtractionResult",
]
