# === FILE: captcha_scout/parser/html_parser.py ===
"""HTML parsing utilities for CaptchaScout.

A page is parsed exactly once per visit; :func:`parse_html` returns a
:class:`ParsedPage` that the detectors and the link extractor share:

* soup:    the BeautifulSoup document (CSS selectors, attribute reads).
* scripts: every ``<script>`` node as inline body plus resolved ``src``.
* anchors: raw ``href`` values of ``<a>`` tags in document order.

Malformed or partial markup is tolerated; whatever BeautifulSoup recovers
is used and missing pieces are simply absent.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__: Sequence[str] = ("ScriptNode", "ParsedPage", "parse_html")


@dataclass(slots=True)
class ScriptNode:
    """One ``<script>`` element: inline body and absolute ``src`` (if any)."""

    inline: str = ""
    src: Optional[str] = None


@dataclass(slots=True)
class ParsedPage:
    """Parsed representation of a fetched HTML page."""

    url: str
    html: str
    soup: BeautifulSoup
    scripts: list[ScriptNode] = field(default_factory=list)
    anchors: list[str] = field(default_factory=list)


def _scripts(soup: BeautifulSoup, base_url: str) -> list[ScriptNode]:
    nodes: list[ScriptNode] = []
    for tag in soup.find_all("script"):
        if not isinstance(tag, Tag):
            continue
        inline = tag.string or ""
        src_val = tag.get("src")
        src: Optional[str] = None
        if isinstance(src_val, str) and src_val.strip():
            try:
                src = urljoin(base_url, src_val.strip())
            except ValueError:
                src = None
        nodes.append(ScriptNode(inline=str(inline), src=src))
    return nodes


def _anchors(soup: BeautifulSoup) -> list[str]:
    hrefs: list[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if isinstance(href, str) and href.strip():
            hrefs.append(href.strip())
    return hrefs


def parse_html(page: Any) -> ParsedPage:
    """Parse raw HTML (string) or :class:`~captcha_scout.crawler.models.PageData`.

    Parameters
    ----------
    page
        Either a *str* (HTML markup) **or** an object with ``url`` and
        ``content`` attributes.  Script ``src`` values are resolved against
        the page URL, so bare strings keep relative ``src`` values as-is.
    """
    if hasattr(page, "content") and hasattr(page, "url"):
        html = page.content
        base_url = str(page.url)
    else:
        html = page
        base_url = ""
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="replace")
    html = html or ""

    soup = BeautifulSoup(html, "html.parser")
    return ParsedPage(
        url=base_url,
        html=html,
        soup=soup,
        scripts=_scripts(soup, base_url),
        anchors=_anchors(soup),
    )
