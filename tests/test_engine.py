# File: tests/test_engine.py
"""Синхронные обёртки движка, логгер и фильтр внешних скриптов (без сети)."""
import asyncio
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

import captcha_scout.engine as engine_module
from captcha_scout.aggregator import GENERIC_ERROR, ScanResult
from captcha_scout.config import ScoutConfig
from captcha_scout.crawler.script_fetcher import ExternalScriptFetcher, should_fetch
from captcha_scout.engine import Engine, get_site_keys
from captcha_scout.logger import LOGGER_NAME, configure, init_logging


def test_get_site_keys_invalid_url():
    result = get_site_keys("not a url")
    assert result.captchas == []
    assert result.error == GENERIC_ERROR


def test_engine_scan_invalid_url():
    result = Engine(ScoutConfig(max_pages=2)).scan("ftp://example.com/")
    assert result.error == GENERIC_ERROR
    assert result.visited == []


def test_engine_scan_timeout(monkeypatch):
    async def slow(url, cfg):
        await asyncio.sleep(2)
        return ScanResult()

    monkeypatch.setattr(engine_module, "start_scan", slow)
    with pytest.raises(asyncio.TimeoutError):
        Engine().scan("https://example.com", timeout=0.2)


def test_engine_load_config_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = Engine.load_config(None)
    assert cfg == ScoutConfig()


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://cdn.example.com/js/CAPTCHA-loader.js", True),
        ("https://example.com/static/security/check.js", True),
        ("https://example.com/static/app.js", False),
        ("data:text/javascript,captcha", False),
        (None, False),
    ],
)
def test_should_fetch(url, expected):
    assert should_fetch(url, ("captcha", "security")) is expected


@pytest.mark.asyncio()
async def test_external_fetch_disabled():
    class DummyFetcher:
        config = ScoutConfig(fetch_external_scripts=False)

        async def fetch(self, url, timeout=None):  # pragma: no cover
            raise AssertionError("must not be called")

    fetcher = ExternalScriptFetcher(DummyFetcher())
    assert await fetcher.maybe_fetch("https://example.com/captcha.js") is None


def test_configure_writes_log_file(tmp_path):
    log_file = tmp_path / "scout.log"
    lg = configure(level="DEBUG", log_file=log_file)
    try:
        assert lg.name == LOGGER_NAME
        assert len(lg.handlers) == 2
        lg.debug("visited %s", "https://example.com/")
        for handler in lg.handlers:
            handler.flush()
        assert "visited https://example.com/" in log_file.read_text(encoding="utf-8")
    finally:
        init_logging()

    restored = logging.getLogger(LOGGER_NAME)
    assert restored.level == logging.WARNING
    assert len(restored.handlers) == 1


def test_console_output_goes_to_stderr(tmp_path):
    lg = configure(level="INFO", log_file=tmp_path / "scout.log")
    try:
        console, rotating = lg.handlers
        assert console.stream is sys.stderr
        assert isinstance(rotating, RotatingFileHandler)
        assert rotating.maxBytes == 5 * 1024 * 1024
        assert rotating.backupCount == 3
        assert lg.propagate is False
    finally:
        init_logging()
