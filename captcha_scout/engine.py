# File: captcha_scout/engine.py
"""captcha_scout.engine: Orchestration layer для запуска обхода из кода, CLI и тестов."""

from __future__ import annotations

import asyncio
from typing import Optional

from captcha_scout.aggregator import ScanResult
from captcha_scout.config import ScoutConfig, load_config
from captcha_scout.crawler.crawler import AsyncCrawler
from captcha_scout.logger import logger

__all__ = ["Engine", "start_scan", "get_site_keys"]


async def start_scan(url: str, cfg: Optional[ScoutConfig] = None) -> ScanResult:
    """
    Запускает AsyncCrawler в контексте сессии и возвращает ScanResult.

    Parameters
    ----------
    url : str
        Абсолютный адрес стартовой страницы.
    cfg : ScoutConfig, optional
        Конфигурация обхода; по умолчанию значения ScoutConfig().
    """
    async with AsyncCrawler(cfg) as crawler:
        return await crawler.run(url)


def get_site_keys(url: str, cfg: Optional[ScoutConfig] = None) -> ScanResult:
    """Синхронная обёртка над start_scan для скриптов."""
    try:
        return asyncio.run(start_scan(url, cfg))
    except Exception:
        logger.exception("Error in get_site_keys for %r", url)
        return ScanResult.failure()


class Engine:
    """Фасад: загрузка конфига и запуск обхода с общим таймаутом."""

    @staticmethod
    def load_config(path: Optional[str]) -> ScoutConfig:
        """Загружает конфиг из YAML/JSON или использует значения по умолчанию."""
        return load_config(path)

    def __init__(self, config: Optional[ScoutConfig] = None) -> None:
        self.config = config or ScoutConfig()

    def scan(self, url: str, timeout: Optional[float] = None) -> ScanResult:
        """Запускает обход; при заданном timeout прерывает его по asyncio.TimeoutError."""
        logger.info("Starting scan of %s", url)
        coro = start_scan(url, self.config)
        try:
            if timeout:
                return asyncio.run(asyncio.wait_for(coro, timeout=timeout))
            return asyncio.run(coro)
        except asyncio.TimeoutError:
            logger.error("Scanning did not finish within %s seconds", timeout)
            raise
