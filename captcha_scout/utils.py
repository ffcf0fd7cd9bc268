# File: captcha_scout/utils.py
"""captcha_scout.utils: Утилиты для работы с URL: схема по умолчанию, origin, дубликаты."""

from __future__ import annotations

from typing import Collection, List, Optional, Sequence
from urllib.parse import urlparse, urlunparse

from captcha_scout.exceptions import InvalidSeedError
from captcha_scout.logger import logger

__all__: Sequence[str] = (
    "ensure_scheme",
    "origin_of",
    "same_origin",
    "remove_duplicates",
)


def ensure_scheme(url: str, default: str = "https") -> str:
    """Добавляет схему к адресу без неё: ``example.com`` и ``//example.com`` -> ``https://example.com``."""
    url = url.strip()
    if url.startswith("//"):
        return f"{default}:{url}"
    if "://" not in url:
        return f"{default}://{url}"
    return url


def origin_of(url: str) -> str:
    """Возвращает origin (``scheme://host[:port]``) http(s)-адреса или бросает InvalidSeedError."""
    if not isinstance(url, str) or not url.strip() or any(ch.isspace() for ch in url.strip()):
        raise InvalidSeedError(str(url))
    try:
        parsed = urlparse(url.strip())
        host = parsed.hostname
        _ = parsed.port  # ValueError на нечисловом порте
    except ValueError as exc:
        raise InvalidSeedError(url) from exc
    if parsed.scheme.lower() not in ("http", "https") or not host:
        raise InvalidSeedError(url)
    return urlunparse((parsed.scheme.lower(), parsed.netloc.lower(), "", "", "", ""))


def same_origin(url: str, origin: str) -> bool:
    """Проверяет, что url относится к тому же origin."""
    try:
        return origin_of(url) == origin
    except InvalidSeedError:
        logger.debug("Skipping malformed URL: %s", url)
        return False


def remove_duplicates(items: Collection[str], label: Optional[str] = None) -> List[str]:
    """Удаляет дубликаты, сохраняя порядок."""
    unique = list(dict.fromkeys(items))
    removed = len(items) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate %s", removed, label or "entries")
    return unique
