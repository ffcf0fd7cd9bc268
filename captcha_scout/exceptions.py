"""captcha_scout.exceptions: ошибки, которыми обмениваются модули краулера."""

from __future__ import annotations

from typing import Optional


class ScoutError(Exception):
    """Base class for CaptchaScout errors."""


class InvalidSeedError(ScoutError, ValueError):
    """The seed URL cannot be turned into an http(s) origin."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid seed URL: {url!r}")
        self.url = url


class FetchError(ScoutError):
    """A GET did not produce a usable text body."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status = status


__all__ = ["ScoutError", "InvalidSeedError", "FetchError"]
