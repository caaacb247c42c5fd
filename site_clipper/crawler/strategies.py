"""
Request identity profiles tried in order when a page refuses the previous one.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

__all__ = ("FetchStrategy", "STRATEGIES", "DEFAULT_STRATEGY", "build_headers", "strategies_for")


USER_AGENTS: Dict[str, str] = {
    "default": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "chrome-mac": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "firefox": "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "mobile": (
        "Mozilla/5.0 (Linux; Android 10; SM-G981B) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
    ),
    "googlebot": "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)",
}


def build_headers(user_agent: str) -> Dict[str, str]:
    """Browser-like header set around *user_agent*."""
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
        "Accept-Encoding": "gzip, deflate",
        "Upgrade-Insecure-Requests": "1",
    }


@dataclass(frozen=True, slots=True)
class FetchStrategy:
    """One named header profile."""

    name: str
    headers: Mapping[str, str]

    def merged_headers(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Strategy headers with caller-supplied *extra* headers taking precedence."""
        merged = dict(self.headers)
        if extra:
            merged.update(extra)
        return merged


STRATEGIES: Tuple[FetchStrategy, ...] = tuple(
    FetchStrategy(name, build_headers(ua)) for name, ua in USER_AGENTS.items()
)
DEFAULT_STRATEGY: FetchStrategy = STRATEGIES[0]


def strategies_for(use_fallback: bool) -> Tuple[FetchStrategy, ...]:
    """All five profiles in order, or only the default one when fallback is disabled."""
    return STRATEGIES if use_fallback else (DEFAULT_STRATEGY,)
