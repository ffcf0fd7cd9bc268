"""Ordered table of vendor matchers used by :mod:`captcha_scout.detect.extractor`.

Every entry is one regular expression with a ``key`` group (the public site
key / app id) and, for entries built with ``with_attributes=True``, optional
``size``, ``theme`` and ``action`` groups.

Order matters: within one extraction the first matcher that claims an
identifier wins, so vendor-specific conventions come before the generic
``sitekey:`` / ``data-sitekey=`` / ``captchaKey`` fallbacks.  Adding a vendor
means adding one :func:`matcher` entry at the right position.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

__all__ = ("VendorMatcher", "matcher", "VENDOR_MATCHERS")


@dataclass(frozen=True, slots=True)
class VendorMatcher:
    """A declarative rule recognising one provider's embedding convention."""

    pattern: re.Pattern[str]
    vendor_type: str
    with_attributes: bool = False


def matcher(
    regex: str,
    vendor_type: str,
    *,
    with_attributes: bool = False,
    flags: int = re.IGNORECASE,
) -> VendorMatcher:
    pattern = re.compile(regex, flags)
    if "key" not in pattern.groupindex:
        raise ValueError(f"matcher for {vendor_type!r} has no 'key' group")
    return VendorMatcher(pattern, vendor_type, with_attributes)


# --------------------------------------------------------------------------- #
# Regex building blocks                                                       #
# --------------------------------------------------------------------------- #

_Q = r"""['"]"""
_KEY = r"""(?P<key>[^'"\s]+)"""
_UUID = r"(?P<key>[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})"
_HEX32 = r"(?P<key>[0-9a-f]{32})"
# query string prefix before the interesting parameter: `?a=b&` or `?a=b&amp;`
_QS = r"""\?(?:[^'"\s<>]*?&(?:amp;)?)?"""
_URL_VALUE = r"""(?P<key>[^&#'"\s<>]+)"""


def _option(name: str, group: str) -> str:
    """Optional look-ahead capturing ``name: 'value'`` anywhere in the options object."""
    return rf"""(?=(?:[^}}]*?\b{name}{_Q}?\s*:\s*{_Q}(?P<{group}>[\w-]+){_Q})?)"""


def _options_with_sitekey(key_name: str = "sitekey") -> str:
    """``{ ..., sitekey: 'KEY', size: 'invisible', theme: 'dark' }`` in any order."""
    return (
        r"\{"
        + _option("size", "size")
        + _option("theme", "theme")
        + rf"""[^}}]*?\b{key_name}{_Q}?\s*:\s*{_Q}{_KEY}{_Q}"""
    )


# first render() argument: '#el', el, or one nested call like getElementById('el')
_RENDER_TARGET = r"""\(\s*(?:[^,()]|\([^()]*\))+,\s*"""


# --------------------------------------------------------------------------- #
# The table                                                                   #
# --------------------------------------------------------------------------- #

VENDOR_MATCHERS: Tuple[VendorMatcher, ...] = (
    # Cloudflare Turnstile
    matcher(
        r"\bturnstile\.render" + _RENDER_TARGET + _options_with_sitekey(),
        "Cloudflare Turnstile",
        with_attributes=True,
    ),
    matcher(
        rf"""\bturnstile\.render\(\s*{_Q}(?P<key>[^'"#.\s][^'"\s]*){_Q}\s*\)""",
        "Cloudflare Turnstile",
    ),
    # reCAPTCHA
    matcher(
        rf"""\bgrecaptcha(?:\.enterprise)?\.execute\(\s*{_Q}{_KEY}{_Q}"""
        rf"""(?:\s*,\s*\{{\s*{_Q}?action{_Q}?\s*:\s*{_Q}(?P<action>[^'"]+){_Q})?""",
        "reCAPTCHA v3",
        with_attributes=True,
    ),
    matcher(
        r"\bgrecaptcha(?:\.enterprise)?\.render" + _RENDER_TARGET + _options_with_sitekey(),
        "reCAPTCHA v2",
        with_attributes=True,
    ),
    # hCaptcha
    matcher(
        r"\bhcaptcha\.render" + _RENDER_TARGET + _options_with_sitekey(),
        "hCaptcha",
        with_attributes=True,
    ),
    # loader URLs carrying the key
    matcher(
        r"/recaptcha/(?:api|enterprise)\.js" + _QS + r"render=(?!explicit\b|onload\b)" + _URL_VALUE,
        "reCAPTCHA v3",
    ),
    matcher(r"""hcaptcha[^'"\s<>?]*""" + _QS + r"sitekey=" + _URL_VALUE, "hCaptcha"),
    # Arkose Labs / FunCaptcha
    matcher(r"(?:arkoselabs\.com|funcaptcha\.com)/v2/" + _UUID, "FunCaptcha"),
    matcher(rf"""\bpublic_?key{_Q}?\s*:\s*{_Q}{_UUID}{_Q}""", "FunCaptcha"),
    # MTCaptcha
    matcher(
        r"\bmtcaptchaConfig\s*=\s*"
        + r"\{"
        + _option("theme", "theme")
        + rf"""[^}}]*?\bsitekey{_Q}?\s*:\s*{_Q}{_KEY}{_Q}""",
        "MTCaptcha",
        with_attributes=True,
    ),
    # Friendly Captcha widget markup
    matcher(
        rf"""class\s*=\s*{_Q}[^'"]*\bfrc-captcha\b[^'"]*{_Q}[^>]*?\bdata-sitekey\s*=\s*{_Q}(?P<key>[^'"]+){_Q}""",
        "FriendlyCaptcha",
    ),
    # GeeTest
    matcher(rf"""\bcaptcha_?id{_Q}?\s*:\s*{_Q}{_HEX32}{_Q}""", "GeeTest v4"),
    matcher(rf"""\bgt{_Q}?\s*:\s*{_Q}{_HEX32}{_Q}""", "GeeTest"),
    # KeyCaptcha
    matcher(rf"""\bs_s_c_user_id{_Q}?\s*[:=]\s*{_Q}?(?P<key>[^'"\s,;]+)""", "KeyCaptcha"),
    # PerimeterX / HUMAN
    matcher(rf"""\b_pxAppId{_Q}?\s*[:=]\s*{_Q}(?P<key>PX[0-9a-z]+){_Q}""", "PerimeterX"),
    matcher(r"perimeterx\.net/(?P<key>PX[0-9a-z]+)/", "PerimeterX"),
    # AWS WAF
    matcher(
        r"\bAwsWafCaptcha\.renderCaptcha" + _RENDER_TARGET + rf"""\{{[^}}]*?\bapiKey{_Q}?\s*:\s*{_Q}{_KEY}{_Q}""",
        "AWS WAF CAPTCHA",
    ),
    # generic fallbacks
    matcher(rf"""{_Q}?\bsitekey{_Q}?\s*:\s*{_Q}{_KEY}{_Q}""", "reCAPTCHA"),
    # bare data-sitekey attributes in script text are hCaptcha embeds
    matcher(rf"""{_Q}?\bdata-sitekey{_Q}?\s*=\s*{_Q}(?P<key>[^'"]+){_Q}""", "hCaptcha"),
    matcher(rf"""\bcaptcha\.execute\(\s*{_Q}{_KEY}{_Q}""", "Dynamic CAPTCHA"),
    matcher(rf"""\bloadCaptcha\(\s*{_Q}{_KEY}{_Q}""", "Dynamic CAPTCHA"),
    matcher(rf"""\bcaptcha_?key{_Q}?\s*[:=]\s*{_Q}{_KEY}{_Q}""", "Generic CAPTCHA"),
)
