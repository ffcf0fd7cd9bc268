# File: tests/test_cli.py
"""Тесты для CLI (`captcha_scout/cli.py`) с использованием click.testing.CliRunner.
Проверяют команды `scan`, `config`, `--version`, а также обработку ошибок.
"""
import asyncio
import json

import pytest
from click.testing import CliRunner

import captcha_scout.cli as cli_module
from captcha_scout.aggregator import ScanResult
from captcha_scout.cli import cli
from captcha_scout.detect.models import CaptchaRecord, Location


@pytest.fixture(autouse=True)
def patch_start_scan(monkeypatch):
    """Патчим start_scan: возвращаем фиктивный результат без сети и запоминаем аргументы."""
    calls = []
    result = ScanResult(
        captchas=[
            CaptchaRecord(
                vendor_type="reCAPTCHA v2",
                identifier="6Lc_example_key_123",
                location=Location.HTML_ELEMENT,
                found_on="https://example.com/",
                variant="Invisible reCAPTCHA",
            )
        ],
        visited=["https://example.com/"],
    )

    async def fake_scan(url, cfg):
        calls.append((url, cfg))
        return result

    monkeypatch.setattr(cli_module, "start_scan", fake_scan)
    return calls


@pytest.fixture()
def isolated(tmp_path, monkeypatch):
    """Работаем в пустой папке, чтобы не подхватить configs/default.yaml."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "CaptchaScout" in result.output


def test_show_config(isolated):
    cfg_file = isolated / "config.json"
    cfg_file.write_text(json.dumps({"max_pages": 4, "timeout": 3.0}), encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["max_pages"] == 4
    assert data["dedup_key"] == "identifier"


def test_scan_stdout_adds_default_scheme(isolated, patch_start_scan):
    runner = CliRunner()
    result = runner.invoke(cli, ["--limit", "3", "scan", "example.com"])
    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output["captchas"][0]["identifier"] == "6Lc_example_key_123"
    assert "error" not in output

    url, cfg = patch_start_scan[0]
    assert url == "https://example.com"
    assert cfg.max_pages == 3


def test_scan_json_file(isolated):
    out = isolated / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["scan", "https://example.com", "--json", str(out)])
    assert result.exit_code == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["captchas"][0]["variant"] == "Invisible reCAPTCHA"


def test_scan_html_file(isolated):
    out = isolated / "reports" / "report.html"
    runner = CliRunner()
    result = runner.invoke(cli, ["scan", "https://example.com", "--html", str(out)])
    assert result.exit_code == 0
    html = out.read_text(encoding="utf-8")
    assert "6Lc_example_key_123" in html
    assert "Invisible reCAPTCHA" in html


def test_scan_error_exits_non_zero(isolated, monkeypatch):
    async def failing(url, cfg):
        return ScanResult.failure()

    monkeypatch.setattr(cli_module, "start_scan", failing)
    runner = CliRunner()
    result = runner.invoke(cli, ["scan", "not a url"])
    assert result.exit_code == 1
    assert "Failed to analyze the website" in result.output


def test_scan_timeout(isolated, monkeypatch):
    async def slow(url, cfg):
        await asyncio.sleep(2)
        return ScanResult()

    monkeypatch.setattr(cli_module, "start_scan", slow)

    runner = CliRunner()
    result = runner.invoke(cli, ["scan", "https://example.com", "--scan-timeout", "0.5"])
    assert result.exit_code != 0
    assert "не завершён" in result.output


def test_missing_config_file(isolated):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(isolated / "nope.yaml"), "config"])
    assert result.exit_code != 0
