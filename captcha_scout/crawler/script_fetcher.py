# captcha_scout/crawler/script_fetcher.py
"""
Conditional download of external scripts that look CAPTCHA/security related.
"""
from __future__ import annotations

from typing import Iterable, Optional

from captcha_scout.crawler.fetcher import Fetcher
from captcha_scout.crawler.models import FetchResult


def should_fetch(script_url: Optional[str], hints: Iterable[str]) -> bool:
    """True when the resolved script URL contains one of *hints* (case-insensitive)."""
    if not script_url or not script_url.lower().startswith(("http://", "https://")):
        return False
    lowered = script_url.lower()
    return any(hint in lowered for hint in hints)


class ExternalScriptFetcher:
    """Fetches hinted ``<script src>`` bodies with the short script timeout."""

    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher
        self.config = fetcher.config

    async def maybe_fetch(self, script_url: Optional[str]) -> Optional[FetchResult]:
        """
        ``None`` when the script is not worth fetching, otherwise the
        :class:`FetchResult` of a single GET; errors are returned, not raised.
        """
        if not self.config.fetch_external_scripts:
            return None
        if not should_fetch(script_url, self.config.script_hints):
            return None
        return await self.fetcher.fetch(script_url, timeout=self.config.script_timeout)  # type: ignore[arg-type]
