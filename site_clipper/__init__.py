"""
SiteClipper package initializer.
Defines package version and exposes the crawling API.
"""
__version__ = "0.1.0"

from site_clipper.clipper import clip_page, clip_pages
from site_clipper.config import CrawlOptions, load_options
from site_clipper.crawler.crawler import RecursiveCrawler, crawl_recursively
from site_clipper.parser.markdown import count_words, markup_to_text

__all__ = [
    "__version__",
    "CrawlOptions",
    "RecursiveCrawler",
    "clip_page",
    "clip_pages",
    "count_words",
    "crawl_recursively",
    "load_options",
    "markup_to_text",
]
