"""Identifier extraction from free text (inline scripts, script URLs, raw HTML).

Pure text-in, detections-out: no network and no DOM.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Set

from captcha_scout.detect.matchers import VENDOR_MATCHERS, VendorMatcher
from captcha_scout.detect.models import Detection, is_valid_identifier

__all__ = ("extract",)


def extract(
    text: Optional[str],
    matchers: Iterable[VendorMatcher] = VENDOR_MATCHERS,
) -> List[Detection]:
    """Apply *matchers* in order and return one :class:`Detection` per identifier.

    The first matcher that yields a given identifier claims it; later
    matchers skip that value.  Text without any known pattern gives ``[]``.
    """
    if not text:
        return []

    found: List[Detection] = []
    claimed: Set[str] = set()
    for rule in matchers:
        for match in rule.pattern.finditer(text):
            identifier = (match.group("key") or "").strip()
            if not is_valid_identifier(identifier) or identifier in claimed:
                continue
            claimed.add(identifier)
            attrs = match.groupdict() if rule.with_attributes else {}
            found.append(
                Detection(
                    vendor_type=rule.vendor_type,
                    identifier=identifier,
                    size=attrs.get("size"),
                    theme=attrs.get("theme"),
                    action=attrs.get("action"),
                )
            )
    return found
