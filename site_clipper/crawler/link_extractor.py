"""
Link extraction for SiteClipper.
"""
from __future__ import annotations

from typing import List, Set, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_clipper.crawler.models import ExtractedLink
from site_clipper.utils import is_asset_url, is_http_url, strip_query_and_fragment

ANCHOR_TEXT_LIMIT = 100


def extract_links(page: Union[BeautifulSoup, str], base_url: str) -> List[ExtractedLink]:
    """
    Extract outbound HTTP(S) links from a parsed page (or raw HTML).

    Targets are resolved against *base_url*, deduplicated by resolved address,
    asset links (.pdf, .jpg, ...) are dropped, and query/fragment are removed
    from what is emitted. Malformed hrefs are skipped.
    """
    soup = BeautifulSoup(page, "html.parser") if isinstance(page, str) else page
    seen: Set[str] = set()
    links: List[ExtractedLink] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str) or not href_val.strip():
            continue
        try:
            absolute = urljoin(base_url, href_val.strip())
            if absolute in seen:
                continue
            seen.add(absolute)
            if not is_http_url(absolute) or is_asset_url(absolute):
                continue
            clean = strip_query_and_fragment(absolute)
        except ValueError:
            continue
        text = tag.get_text(" ", strip=True)[:ANCHOR_TEXT_LIMIT]
        links.append(ExtractedLink(url=clean, text=text))
    return links


__all__ = ["extract_links", "ANCHOR_TEXT_LIMIT"]
