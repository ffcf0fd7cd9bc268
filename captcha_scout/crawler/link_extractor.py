# captcha_scout/crawler/link_extractor.py
"""
Link extraction and URL normalization utilities for CaptchaScout.
"""
from __future__ import annotations

import posixpath
from typing import Iterable, List, Optional
from urllib.parse import parse_qsl, quote, unquote, urlencode, urljoin, urlparse, urlunparse

from captcha_scout.utils import remove_duplicates, same_origin

SKIPPED_SCHEMES = ("mailto:", "javascript:", "tel:", "data:")


def normalize_url(url: str) -> str:
    """
    Canonical form used as the visited-set key: lower-case scheme and host,
    dot segments resolved, query parameters sorted, fragment dropped.
    """
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    netloc = parsed.netloc.lower()
    path = unquote(parsed.path or "/")
    norm = posixpath.normpath(path)
    if parsed.path.endswith("/") and not norm.endswith("/"):
        norm += "/"
    if not norm.startswith("/"):
        norm = "/" + norm
    # posixpath keeps a leading '//'
    if norm.startswith("//"):
        norm = "/" + norm.lstrip("/")
    norm = quote(norm, safe="/:@!$&'()*+,;=-._~")
    qs = parse_qsl(parsed.query, keep_blank_values=True)
    qs.sort()
    query = urlencode(qs, doseq=True)
    return urlunparse((scheme, netloc, norm, "", query, ""))


def resolve(href: str, base_url: str) -> Optional[str]:
    """Absolute, normalized form of *href* or ``None`` when it cannot be used."""
    href = href.strip()
    if not href or href.lower().startswith(SKIPPED_SCHEMES):
        return None
    try:
        absolute = urljoin(base_url, href)
        if urlparse(absolute).scheme not in ("http", "https"):
            return None
        return normalize_url(absolute)
    except ValueError:
        return None


def extract_auth_links(
    hrefs: Iterable[str],
    page_url: str,
    origin: str,
    terms: Iterable[str],
) -> List[str]:
    """
    Same-origin links whose normalized URL contains one of *terms*.

    Document order is kept; duplicates and malformed links are dropped.
    """
    terms = tuple(terms)
    links: List[str] = []
    for href in hrefs:
        absolute = resolve(href, page_url)
        if absolute is None or not same_origin(absolute, origin):
            continue
        lowered = absolute.lower()
        if any(term in lowered for term in terms):
            links.append(absolute)
    return remove_duplicates(links, "links")
