"""Main-content extraction for SiteClipper.

:class:`ContentExtractor` is the interface the crawler and the clipper depend
on. :class:`ReadabilityContentExtractor` is the default implementation:

1. read page metadata (title, author, publish time, site name) from ``<meta>``
   tags and a few well-known elements;
2. drop scripts, navigation and hidden elements with BeautifulSoup;
3. let ``readability-lxml`` pick the main content region;
4. render the region with :func:`~site_clipper.parser.markdown.markup_to_text`
   and reject it when it is shorter than the minimum content length.
"""
from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, runtime_checkable
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag
from readability import Document
from readability.readability import Unparseable

from site_clipper.crawler.models import ExtractedContent, ExtractionFailure, ExtractionResult
from site_clipper.logger import get_logger
from site_clipper.parser.markdown import MIN_CONTENT_LENGTH, markup_to_text

__all__: Sequence[str] = (
    "ContentExtractor",
    "ReadabilityContentExtractor",
    "PageMetadata",
    "read_metadata",
)

logger = get_logger("extractor")


@runtime_checkable
class ContentExtractor(Protocol):
    """Turns raw HTML into the page's primary content or an extraction failure."""

    def extract(self, html: str, base_url: str) -> ExtractionResult:
        ...


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class PageMetadata:
    title: Optional[str] = None
    author: Optional[str] = None
    published_time: Optional[str] = None
    site_name: Optional[str] = None


def _meta(soup: BeautifulSoup, *keys: str) -> Optional[str]:
    for key in keys:
        for attr in ("property", "name", "itemprop"):
            tag = soup.find("meta", attrs={attr: key})
            if isinstance(tag, Tag):
                value = tag.get("content")
                if isinstance(value, str) and value.strip():
                    return value.strip()
    return None


def _text_of(tag: object) -> Optional[str]:
    if isinstance(tag, Tag):
        text = tag.get_text(" ", strip=True)
        return text or None
    return None


def _attr_or_text(tag: object, *attrs: str) -> Optional[str]:
    if not isinstance(tag, Tag):
        return None
    for attr in attrs:
        value = tag.get(attr)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return _text_of(tag)


def read_metadata(soup: BeautifulSoup) -> PageMetadata:
    """Collect title, author, publish time and site name from *soup*."""
    title = (
        _meta(soup, "og:title", "twitter:title")
        or _text_of(soup.find("title"))
        or _text_of(soup.find("h1"))
    )
    author = _meta(soup, "author", "article:author", "byl") or _text_of(
        soup.find(attrs={"rel": "author"})
    )
    published = (
        _meta(soup, "article:published_time", "datePublished", "pubdate", "date")
        # microdata on any element, e.g. <span itemprop="datePublished" content="...">
        or _attr_or_text(soup.find(attrs={"itemprop": "datePublished"}), "content", "datetime")
        or _attr_or_text(soup.find("time", attrs={"datetime": True}), "datetime")
    )
    site_name = _meta(soup, "og:site_name", "application-name")
    return PageMetadata(title=title, author=author, published_time=published, site_name=site_name)


# ---------------------------------------------------------------------------
# Content isolation
# ---------------------------------------------------------------------------

# forms stay: some sites wrap the whole page in one
_STRIP_TAGS = (
    "script", "style", "noscript", "template", "iframe", "object", "embed", "svg",
    "canvas", "button", "input", "select", "textarea", "nav", "footer", "aside",
)
_HIDDEN_STYLE = re.compile(r"display\s*:\s*none|visibility\s*:\s*hidden", re.IGNORECASE)
_HEADINGS = ("h1", "h2", "h3", "h4", "h5", "h6")
# readability-lxml placeholder for a document without <title>
_NO_TITLE = "[no-title]"


def _is_hidden(tag: Tag) -> bool:
    style = tag.get("style")
    return tag.has_attr("hidden") or (isinstance(style, str) and bool(_HIDDEN_STYLE.search(style)))


def _remove_boilerplate(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(_STRIP_TAGS):
        if not tag.decomposed:
            tag.decompose()
    for tag in [t for t in soup.find_all(True) if isinstance(t, Tag) and _is_hidden(t)]:
        if not tag.decomposed:
            tag.decompose()


def _lead_heading(soup: BeautifulSoup, titles: Iterable[Optional[str]]) -> Optional[Tag]:
    """The page's own headline: an ``<h1>`` inside article/main or one repeating the title."""
    known = {t for t in titles if t}
    for h1 in soup.find_all("h1"):
        text = h1.get_text(" ", strip=True)
        if text and (h1.find_parent(["article", "main"]) is not None or text in known):
            return h1
    return None


def _absolutize_images(fragment: BeautifulSoup, base_url: str) -> None:
    for img in fragment.find_all("img", src=True):
        src = img.get("src")
        if isinstance(src, str) and src.strip():
            try:
                img["src"] = urljoin(base_url, src.strip())
            except ValueError:
                continue


class ReadabilityContentExtractor:
    """Default :class:`ContentExtractor` backed by ``readability-lxml``."""

    def __init__(
        self,
        *,
        include_images: bool = False,
        min_content_length: int = MIN_CONTENT_LENGTH,
    ) -> None:
        self.include_images = include_images
        self.min_content_length = min_content_length

    def extract(self, html: str, base_url: str) -> ExtractionResult:
        soup = BeautifulSoup(html, "html.parser")
        meta = read_metadata(soup)
        _remove_boilerplate(soup)

        document = Document(str(soup))
        try:
            region_html = document.summary(html_partial=True)
            short_title = document.short_title()
        except Unparseable as exc:
            logger.debug("readability failed for %s: %s", base_url, exc)
            return ExtractionFailure("no content region found")

        region = BeautifulSoup(region_html, "html.parser")
        if not region.get_text(strip=True):
            return ExtractionFailure("no content region found")

        title = _meta(soup, "og:title", "twitter:title")
        if not title and short_title and short_title != _NO_TITLE:
            title = short_title
        title = title or meta.title

        # readability drops header wrappers such as <div class="entry-header">
        lead = _lead_heading(soup, (title, meta.title))
        if lead is not None:
            lead_text = lead.get_text(" ", strip=True)
            if not any(h.get_text(" ", strip=True) == lead_text for h in region.find_all(_HEADINGS)):
                heading = region.new_tag("h1")
                heading.string = lead_text
                region.insert(0, heading)

        if self.include_images:
            _absolutize_images(region, base_url)

        content = markup_to_text(str(region), include_images=self.include_images)
        if not content:
            return ExtractionFailure("no content region found")
        if len(content) < self.min_content_length:
            return ExtractionFailure(
                f"content too short: {len(content)} chars (minimum {self.min_content_length})"
            )

        return ExtractedContent(
            title=title or "Untitled",
            content=content,
            author=meta.author,
            published_time=meta.published_time,
            site_name=meta.site_name,
        )
