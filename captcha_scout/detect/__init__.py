"""captcha_scout.detect: детекторы виджетов CAPTCHA (текстовые шаблоны и атрибуты разметки)."""

from captcha_scout.detect.element_scanner import classify_element, scan, scan_url_parameters
from captcha_scout.detect.extractor import extract
from captcha_scout.detect.matchers import VENDOR_MATCHERS, VendorMatcher

__all__ = ["extract", "scan", "scan_url_parameters", "classify_element", "VENDOR_MATCHERS", "VendorMatcher"]
