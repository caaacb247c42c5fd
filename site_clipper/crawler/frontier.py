"""
Breadth-first frontier and the URL policy that decides what may be visited.
"""
from __future__ import annotations

import re
from collections import deque
from typing import Deque, Iterable, List, Optional, Sequence, Set

from site_clipper.crawler.models import FrontierEntry
from site_clipper.utils import extract_domain, normalize_url


class CrawlPolicy:
    """Same-domain, exclude and include checks, applied in that order."""

    def __init__(
        self,
        start_url: str,
        *,
        same_domain_only: bool = True,
        exclude_patterns: Sequence[re.Pattern[str]] = (),
        include_patterns: Sequence[re.Pattern[str]] = (),
    ) -> None:
        self.start_domain = extract_domain(start_url)
        self.same_domain_only = same_domain_only
        self.exclude_patterns = tuple(exclude_patterns)
        self.include_patterns = tuple(include_patterns)

    def allows(self, url: str) -> bool:
        if self.same_domain_only:
            domain = extract_domain(url)
            # an unparseable host never matches, not even another empty one
            if not domain or domain != self.start_domain:
                return False
        if any(p.search(url) for p in self.exclude_patterns):
            return False
        if self.include_patterns and not any(p.search(url) for p in self.include_patterns):
            return False
        return True


class Frontier:
    """FIFO queue of ``(url, depth)`` entries plus the visited set of normalized URLs.

    Duplicates may sit in the queue; :meth:`mark_visited` is what guarantees a
    normalized URL is processed at most once.
    """

    def __init__(self, max_depth: int, policy: CrawlPolicy) -> None:
        self.max_depth = max_depth
        self.policy = policy
        self._queue: Deque[FrontierEntry] = deque()
        self._visited: Set[str] = set()
        self._visit_order: List[str] = []

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    def push(self, url: str, depth: int) -> bool:
        """Enqueue the normalized form of *url* unless it was already visited."""
        key = normalize_url(url)
        if key in self._visited:
            return False
        self._queue.append(FrontierEntry(key, depth))
        return True

    def extend(self, urls: Iterable[str], depth: int) -> int:
        return sum(1 for url in urls if self.push(url, depth))

    def pop(self) -> FrontierEntry:
        return self._queue.popleft()

    def should_skip(self, entry: FrontierEntry) -> Optional[str]:
        """Reason to skip *entry* without counting it against max_pages, or None to process it."""
        if entry.url in self._visited:
            return "visited"
        if entry.depth > self.max_depth:
            return "too deep"
        if not self.policy.allows(entry.url):
            return "policy"
        return None

    def mark_visited(self, url: str) -> None:
        if url not in self._visited:
            self._visited.add(url)
            self._visit_order.append(url)

    @property
    def visited_urls(self) -> List[str]:
        return list(self._visit_order)


__all__ = ["CrawlPolicy", "Frontier"]
