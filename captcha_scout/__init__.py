"""
CaptchaScout package initializer.
Defines package version and exposes the public API.
"""
__version__ = "0.1.0"

from captcha_scout.aggregator import ScanResult
from captcha_scout.config import ScoutConfig, load_config
from captcha_scout.detect.models import CaptchaRecord, Location
from captcha_scout.engine import Engine, get_site_keys, start_scan

__all__ = [
    "__version__",
    "CaptchaRecord",
    "Engine",
    "Location",
    "ScanResult",
    "ScoutConfig",
    "get_site_keys",
    "load_config",
    "start_scan",
]
