# File: tests/test_extractor.py
import re

import pytest

from captcha_scout.detect.extractor import extract
from captcha_scout.detect.matchers import VENDOR_MATCHERS, matcher


def as_pairs(text):
    return [(d.vendor_type, d.identifier) for d in extract(text)]


def test_turnstile_render_with_bare_key():
    assert as_pairs("turnstile.render('myturnstilekey123')") == [
        ("Cloudflare Turnstile", "myturnstilekey123")
    ]


def test_turnstile_render_options_carry_attributes():
    text = "turnstile.render('#widget', { sitekey: '0x4AAAAAAAB', theme: 'dark', size: 'compact' });"
    [hit] = extract(text)
    assert hit.vendor_type == "Cloudflare Turnstile"
    assert hit.identifier == "0x4AAAAAAAB"
    assert hit.theme == "dark"
    assert hit.size == "compact"


def test_recaptcha_v3_execute_with_action():
    [hit] = extract("grecaptcha.execute('6LdKEYv3abc', {action: 'login'}).then(send);")
    assert (hit.vendor_type, hit.identifier, hit.action) == ("reCAPTCHA v3", "6LdKEYv3abc", "login")


def test_recaptcha_v2_render_options_per_widget():
    text = (
        "grecaptcha.render(document.getElementById('a'), {sitekey: 'key-one-111'});\n"
        "grecaptcha.render('b', {'sitekey': 'key-two-222', 'size': 'invisible'});"
    )
    first, second = extract(text)
    assert (first.vendor_type, first.identifier, first.size) == ("reCAPTCHA v2", "key-one-111", None)
    assert (second.identifier, second.size) == ("key-two-222", "invisible")


@pytest.mark.parametrize(
    "src,expected",
    [
        ("https://www.google.com/recaptcha/api.js?render=6LcSCRIPTkey", [("reCAPTCHA v3", "6LcSCRIPTkey")]),
        ("https://www.google.com/recaptcha/api.js?onload=cb&render=6LcSCRIPTkey", [("reCAPTCHA v3", "6LcSCRIPTkey")]),
        ("https://www.google.com/recaptcha/api.js?render=explicit", []),
        ("https://www.google.com/recaptcha/api.js?onload=cb&render=onload", []),
        (
            "https://js.hcaptcha.com/1/api.js?sitekey=10000000-ffff-ffff-ffff-000000000001",
            [("hCaptcha", "10000000-ffff-ffff-ffff-000000000001")],
        ),
        (
            "https://cdn.hcaptcha-mirror.net/loader.js?render=explicit&sitekey=mirror-site-key-01",
            [("hCaptcha", "mirror-site-key-01")],
        ),
        (
            "https://client-api.arkoselabs.com/v2/11111111-2222-3333-4444-555555555555/api.js",
            [("FunCaptcha", "11111111-2222-3333-4444-555555555555")],
        ),
        ("https://client.perimeterx.net/PXabc12345/main.min.js", [("PerimeterX", "PXabc12345")]),
    ],
)
def test_script_source_urls(src, expected):
    assert as_pairs(src) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        (
            "initGeetest({gt: '0123456789abcdef0123456789abcdef', challenge: c}, cb);",
            ("GeeTest", "0123456789abcdef0123456789abcdef"),
        ),
        (
            "initGeetest4({captchaId: 'fedcba9876543210fedcba9876543210'}, cb);",
            ("GeeTest v4", "fedcba9876543210fedcba9876543210"),
        ),
        ("var s_s_c_user_id = '4567891';", ("KeyCaptcha", "4567891")),
        ("window._pxAppId = 'PXabc12345';", ("PerimeterX", "PXabc12345")),
        (
            "AwsWafCaptcha.renderCaptcha(container, { apiKey: 'aws-api-key-0001', onSuccess: cb });",
            ("AWS WAF CAPTCHA", "aws-api-key-0001"),
        ),
        ("var cfg = { captchaKey: 'generic-key-999' };", ("Generic CAPTCHA", "generic-key-999")),
        ("loadCaptcha('dynamic-key-42');", ("Dynamic CAPTCHA", "dynamic-key-42")),
        ('<div data-sitekey="markup-key-77"></div>', ("hCaptcha", "markup-key-77")),
        ("el.innerHTML = '<div \"data-sitekey\"=\"quoted-key-88\"></div>';", ("hCaptcha", "quoted-key-88")),
        (
            '<div class="frc-captcha" data-sitekey="FCMFRIENDLYKEY"></div>',
            ("FriendlyCaptcha", "FCMFRIENDLYKEY"),
        ),
        ("var options = { sitekey: 'plain-site-key' };", ("reCAPTCHA", "plain-site-key")),
    ],
)
def test_vendor_conventions(text, expected):
    assert as_pairs(text) == [expected]


def test_mtcaptcha_config_with_theme():
    [hit] = extract('var mtcaptchaConfig = {"sitekey": "MTPublic-abc123", "theme": "Neowhite"};')
    assert (hit.vendor_type, hit.identifier, hit.theme) == ("MTCaptcha", "MTPublic-abc123", "Neowhite")


def test_first_matcher_claims_identifier():
    text = "hcaptcha.render('c', {sitekey: 'shared-key-1'}); var backup = {sitekey: 'shared-key-1'};"
    assert as_pairs(text) == [("hCaptcha", "shared-key-1")]


@pytest.mark.parametrize(
    "text",
    [
        "sitekey: 'abc12'",
        "sitekey: '{{ site_key }}'",
        "sitekey: '<%= key %>'",
        "data-sitekey=''",
    ],
)
def test_invalid_identifiers_are_dropped(text):
    assert extract(text) == []


@pytest.mark.parametrize(
    "text",
    [None, "", "console.log('hello world');", "<div <<< ' \" sitekey: {", "grecaptcha.render("],
)
def test_text_without_patterns_yields_nothing(text):
    assert extract(text) == []


def test_matcher_table_is_extensible():
    custom = VENDOR_MATCHERS + (matcher(r"myWidget\(\s*'(?P<key>[^']+)'", "Custom Widget"),)
    [hit] = extract("myWidget('custom-key-123')", custom)
    assert hit.vendor_type == "Custom Widget"


def test_matcher_requires_key_group():
    with pytest.raises(ValueError):
        matcher(r"sitekey=(\w+)", "Broken")
    assert all(isinstance(m.pattern, re.Pattern) for m in VENDOR_MATCHERS)
