# captcha_scout/crawler/fetcher.py
"""
Fetcher module: one GET with redirect cap, timeout and optional retry/backoff.

Transport problems never escape as exceptions; they come back as a failed
:class:`~captcha_scout.crawler.models.FetchResult`.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from captcha_scout.config import ScoutConfig
from captcha_scout.crawler.models import FetchResult
from captcha_scout.exceptions import FetchError

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

#: Content-Type fragments treated as text; an empty header is accepted too
TEXT_TYPES: Sequence[str] = ("text/", "javascript", "ecmascript", "json", "xml")


class Fetcher:
    """GET primitive shared by page visits and external script downloads."""

    def __init__(
        self,
        session: ClientSession,
        config: ScoutConfig,
        retry_status: Sequence[int] = RETRY_STATUS,
    ) -> None:
        self.session = session
        self.config = config
        self._retry_status = retry_status

    async def fetch(self, url: str, timeout: Optional[float] = None) -> FetchResult:
        """
        Fetch *url* and return its text body.

        Non-2xx statuses, too many redirects, timeouts, DNS errors and
        non-text bodies all produce ``FetchResult(error=...)``.
        """
        client_timeout = ClientTimeout(total=timeout or self.config.timeout)
        attempts = 0
        while True:
            try:
                return await self._get(url, client_timeout)
            except FetchError as exc:
                if exc.status in self._retry_status and attempts < self.config.retry_times:
                    attempts += 1
                    # exponential backoff, cap at 60s
                    await asyncio.sleep(min(2**attempts, 60))
                    continue
                return FetchResult(url, error=exc.reason, status=exc.status)
            except asyncio.TimeoutError:
                # no retry on timeout
                return FetchResult(url, error="timeout")
            except (ClientError, UnicodeDecodeError, ValueError) as exc:
                return FetchResult(url, error=f"{type(exc).__name__}: {exc}")

    async def _get(self, url: str, timeout: ClientTimeout) -> FetchResult:
        async with self.session.get(
            url,
            timeout=timeout,
            allow_redirects=True,
            max_redirects=self.config.max_redirects,
            raise_for_status=False,
        ) as resp:
            if not 200 <= resp.status < 300:
                raise FetchError(url, f"HTTP {resp.status}", resp.status)
            ctype = resp.headers.get("Content-Type", "").lower()
            if ctype and not any(t in ctype for t in TEXT_TYPES):
                raise FetchError(url, f"non-text body ({ctype})", resp.status)
            text = await resp.text(errors="replace")
            return FetchResult(str(resp.url), content=text, status=resp.status)
