# File: captcha_scout/aggregator.py
"""captcha_scout.aggregator: постобработка записей страницы и итоговый отчёт обхода."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Hashable, Iterable, List, Literal, Optional

from captcha_scout.detect.models import CaptchaRecord

GENERIC_ERROR = "Failed to analyze the website. Please check the URL and try again."
ENTERPRISE_SUFFIX = " Enterprise"

DedupKey = Literal["identifier", "composite"]


@dataclass(slots=True)
class ScanResult:
    """Результат обхода: найденные CAPTCHA и ошибка (только при полном провале)."""

    captchas: List[CaptchaRecord] = field(default_factory=list)
    error: Optional[str] = None
    visited: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Сериализуемое представление без служебного списка visited."""
        data: Dict[str, Any] = {"captchas": [c.to_dict() for c in self.captchas]}
        if self.error:
            data["error"] = self.error
        return data

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)

    @classmethod
    def failure(cls, message: str = GENERIC_ERROR) -> ScanResult:
        return cls(captchas=[], error=message)


def has_enterprise_marker(html: str, markers: Iterable[str]) -> bool:
    lowered = (html or "").lower()
    return any(marker.lower() in lowered for marker in markers)


def annotate_enterprise(
    records: List[CaptchaRecord], html: str, markers: Iterable[str]
) -> List[CaptchaRecord]:
    """Помечает reCAPTCHA-записи страницы как Enterprise, если в HTML есть маркер.

    Возвращает новый список; исходные записи не изменяются.
    """
    if not has_enterprise_marker(html, markers):
        return list(records)
    annotated: List[CaptchaRecord] = []
    for record in records:
        if "recaptcha" in record.vendor_type.lower() and "enterprise" not in record.vendor_type.lower():
            record = replace(record, vendor_type=record.vendor_type + ENTERPRISE_SUFFIX)
        annotated.append(record)
    return annotated


def _unique(records: Iterable[CaptchaRecord], key: Callable[[CaptchaRecord], Hashable]) -> List[CaptchaRecord]:
    seen: set[Hashable] = set()
    unique: List[CaptchaRecord] = []
    for record in records:
        k = key(record)
        if k in seen:
            continue
        seen.add(k)
        unique.append(record)
    return unique


def dedupe_page(records: Iterable[CaptchaRecord]) -> List[CaptchaRecord]:
    """Дедупликация в пределах страницы по (identifier, vendor_type, location)."""
    return _unique(records, lambda r: r.page_key)


def merge_records(records: Iterable[CaptchaRecord], key: DedupKey = "identifier") -> List[CaptchaRecord]:
    """Итоговое слияние по всем страницам: первая запись для ключа побеждает, порядок сохраняется."""
    if key == "composite":
        return dedupe_page(records)
    return _unique(records, lambda r: r.identifier)


__all__ = [
    "GENERIC_ERROR",
    "ScanResult",
    "annotate_enterprise",
    "has_enterprise_marker",
    "dedupe_page",
    "merge_records",
]
