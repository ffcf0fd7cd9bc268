# === FILE: captcha_scout/crawler/crawler.py ===
from __future__ import annotations

import logging
import time
from typing import Iterator, List, Optional, Set

from aiohttp import ClientSession

from captcha_scout.aggregator import ScanResult, merge_records
from captcha_scout.config import ScoutConfig
from captcha_scout.crawler.fetcher import Fetcher
from captcha_scout.crawler.page_visitor import PageVisitor
from captcha_scout.detect.models import CaptchaRecord
from captcha_scout.utils import origin_of

__all__ = ("AsyncCrawler",)


class AsyncCrawler:
    """
    Bounded depth-first crawl over auth-relevant same-origin pages.

    Pages are visited one at a time.  The worklist is a stack of link
    iterators: descending into a page pushes its links, so the visit order
    equals a recursive descent in discovery order.  Every descent, the seed
    included, requires ``len(visited) < max_pages``.
    """

    def __init__(self, config: Optional[ScoutConfig] = None) -> None:
        self.config = config or ScoutConfig()
        self.session: Optional[ClientSession] = None
        self.visited: Set[str] = set()
        self.logger = logging.getLogger("CaptchaScout")

    async def __aenter__(self) -> AsyncCrawler:
        self.session = ClientSession(
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def run(self, seed_url: str) -> ScanResult:
        """Crawl from *seed_url*; never raises, total failure is reported in ``error``."""
        try:
            return await self._crawl(seed_url)
        except Exception:
            self.logger.exception("Error in crawl of %r", seed_url)
            return ScanResult.failure()

    async def _crawl(self, seed_url: str) -> ScanResult:
        if not self.session:
            raise RuntimeError("Session not initialized")
        origin = origin_of(seed_url)
        self.logger.info("Старт обхода: %s (бюджет %d страниц)", seed_url, self.config.max_pages)
        start = time.monotonic()

        visitor = PageVisitor(Fetcher(self.session, self.config), self.config)
        self.visited = set()
        records: List[CaptchaRecord] = []
        stack: List[Iterator[str]] = [iter([seed_url])]
        while stack:
            link = next(stack[-1], None)
            if link is None:
                stack.pop()
                continue
            if len(self.visited) >= self.config.max_pages:
                continue
            page = await visitor.visit(origin, link, self.visited)
            records.extend(page.records)
            if page.links:
                stack.append(iter(page.links))

        captchas = merge_records(records, key=self.config.dedup_key)
        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц, %d CAPTCHA за %.2f с", len(self.visited), len(captchas), duration
        )
        return ScanResult(captchas=captchas, visited=sorted(self.visited))

