"""Attribute-based widget detection over a parsed document.

Widgets are declared with a key-bearing attribute (``data-sitekey``,
``data-pkey``, ...).  ``data-sitekey`` is shared by several vendors, so the
vendor is decided by :func:`classify_element`: an explicit widget CSS class
wins over the generic ``Unknown CAPTCHA`` fallback.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from captcha_scout.detect.models import CaptchaRecord, Location, is_valid_identifier
from captcha_scout.parser.html_parser import ParsedPage

__all__ = ("scan", "scan_url_parameters", "classify_element", "widget_metadata")

UNKNOWN = "Unknown CAPTCHA"
RECAPTCHA_V2 = "reCAPTCHA v2"
HCAPTCHA = "hCaptcha"
TURNSTILE = "Cloudflare Turnstile"

#: widget class -> vendor, in precedence order
CLASS_HINTS: Tuple[Tuple[str, str], ...] = (
    ("g-recaptcha", RECAPTCHA_V2),
    ("h-captcha", HCAPTCHA),
    ("cf-turnstile", TURNSTILE),
    ("frc-captcha", "FriendlyCaptcha"),
)


@dataclass(frozen=True, slots=True)
class KeyAttribute:
    """Attribute carrying a public key; ``vendor_type=None`` means classify by class."""

    name: str
    vendor_type: Optional[str] = None


KEY_ATTRIBUTES: Tuple[KeyAttribute, ...] = (
    KeyAttribute("data-sitekey"),
    KeyAttribute("data-pkey", "FunCaptcha"),
    KeyAttribute("data-arkose-public-key", "FunCaptcha"),
    KeyAttribute("data-px-appid", "PerimeterX"),
    KeyAttribute("data-mtcaptcha-sitekey", "MTCaptcha"),
    KeyAttribute("data-turnstile-key", TURNSTILE),
    KeyAttribute("data-cf-turnstile", TURNSTILE),
)

WIDGET_SELECTOR = ", ".join(
    [f"[{attr.name}]" for attr in KEY_ATTRIBUTES] + [f".{cls}" for cls, _ in CLASS_HINTS]
)

TURNSTILE_APPEARANCE: Dict[str, str] = {
    "always": "Always-visible Turnstile",
    "execute": "Execute-on-demand Turnstile",
    "interaction-only": "Interaction-only Turnstile",
}

Document = Union[ParsedPage, BeautifulSoup]


def _soup(document: Document) -> BeautifulSoup:
    return document.soup if isinstance(document, ParsedPage) else document


def _attr(element: Tag, name: str) -> Optional[str]:
    value = element.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _classes(element: Tag) -> List[str]:
    value = element.get("class") or []
    if isinstance(value, str):
        value = value.split()
    return [c.lower() for c in value]


def classify_element(element: Tag) -> str:
    """Vendor for a ``data-sitekey`` element: widget class first, then fallback."""
    classes = _classes(element)
    for css_class, vendor in CLASS_HINTS:
        if css_class in classes:
            return vendor
    return UNKNOWN


def widget_metadata(vendor_type: str, element: Tag) -> Dict[str, str]:
    """Rendering metadata for reCAPTCHA v2, hCaptcha and Turnstile widgets."""
    if vendor_type not in (RECAPTCHA_V2, HCAPTCHA, TURNSTILE):
        return {}
    size = (_attr(element, "data-size") or "normal").lower()
    theme = (_attr(element, "data-theme") or "light").lower()
    if vendor_type == TURNSTILE:
        appearance = (_attr(element, "data-appearance") or "always").lower()
        variant = TURNSTILE_APPEARANCE.get(appearance, f"{appearance.capitalize()} Turnstile")
    elif vendor_type == RECAPTCHA_V2:
        variant = "Invisible reCAPTCHA" if size == "invisible" else "Checkbox reCAPTCHA"
    else:
        variant = "Invisible hCaptcha" if size == "invisible" else "Challenge hCaptcha"
    return {"theme": theme, "size": size, "difficulty": size, "variant": variant}


def scan(document: Document, found_on: str = "") -> List[CaptchaRecord]:
    """Return one record per key attribute found on widget elements."""
    soup = _soup(document)
    if not found_on and isinstance(document, ParsedPage):
        found_on = document.url

    records: List[CaptchaRecord] = []
    for element in soup.select(WIDGET_SELECTOR):
        for attr in KEY_ATTRIBUTES:
            identifier = _attr(element, attr.name)
            if not is_valid_identifier(identifier):
                continue
            vendor_type = attr.vendor_type or classify_element(element)
            records.append(
                CaptchaRecord(
                    vendor_type=vendor_type,
                    identifier=identifier,  # type: ignore[arg-type]
                    location=Location.HTML_ELEMENT,
                    found_on=found_on,
                    **widget_metadata(vendor_type, element),
                )
            )
    return records


# --------------------------------------------------------------------------- #
# Vendor iframes: the key travels as a URL parameter                          #
# --------------------------------------------------------------------------- #

#: (URL substring, vendor, key parameter names)
FRAME_RULES: Tuple[Tuple[str, str, Sequence[str]], ...] = (
    ("recaptcha/api2/", RECAPTCHA_V2, ("k",)),
    ("recaptcha/enterprise/", "reCAPTCHA v2 Enterprise", ("k",)),
    ("hcaptcha.com", HCAPTCHA, ("sitekey",)),
    ("arkoselabs.com", "FunCaptcha", ("pkey", "public_key")),
    ("funcaptcha.com", "FunCaptcha", ("pkey", "public_key")),
)


def _url_params(url: str) -> Dict[str, List[str]]:
    parsed = urlparse(url)
    params = parse_qs(parsed.query)
    # hCaptcha passes its configuration in the fragment
    for name, values in parse_qs(parsed.fragment).items():
        params.setdefault(name, values)
    return params


def scan_url_parameters(document: Document, found_on: str = "") -> List[CaptchaRecord]:
    """Keys passed to vendor iframes (``<iframe src=".../anchor?k=KEY">``)."""
    soup = _soup(document)
    if not found_on and isinstance(document, ParsedPage):
        found_on = document.url

    records: List[CaptchaRecord] = []
    for frame in soup.find_all("iframe", src=True):
        src = _attr(frame, "src")
        if not src:
            continue
        lowered = src.lower()
        for hint, vendor_type, names in FRAME_RULES:
            if hint not in lowered:
                continue
            try:
                params = _url_params(src)
            except ValueError:
                break
            for name in names:
                identifier = (params.get(name) or [""])[0].strip()
                if is_valid_identifier(identifier):
                    size = (params.get("size") or [None])[0]
                    records.append(
                        CaptchaRecord(
                            vendor_type=vendor_type,
                            identifier=identifier,
                            location=Location.URL_PARAMETER,
                            found_on=found_on,
                            size=size,
                        )
                    )
                    break
            break
    return records
