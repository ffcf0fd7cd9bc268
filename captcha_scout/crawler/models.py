# captcha_scout/crawler/models.py
"""
Data models for the CaptchaScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from captcha_scout.detect.models import CaptchaRecord


@dataclass(slots=True)
class PageData:
    """Holds the final URL and decoded text of a fetched resource."""

    url: str
    content: str


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of one GET: either ``content`` or an ``error`` description."""

    url: str
    content: Optional[str] = None
    error: Optional[str] = None
    status: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.content is not None

    def page(self) -> PageData:
        if not self.ok:
            raise ValueError(f"fetch of {self.url} failed: {self.error}")
        return PageData(self.url, self.content or "")


@dataclass(slots=True)
class PageVisit:
    """Records found on one page plus the auth-relevant links it points to."""

    url: str
    records: List[CaptchaRecord] = field(default_factory=list)
    links: List[str] = field(default_factory=list)
    fetched: bool = False
