# === FILE: captcha_scout/logger.py ===
"""Logging setup for CaptchaScout.

Every module logs through the ``CaptchaScout`` logger.  Records go to
stderr, so the JSON that ``captcha-scout scan`` prints on stdout stays
machine-readable, and optionally to a size-rotated file::

    from captcha_scout.logger import logger
    logger.warning("Error crawling %s: %s", url, reason)

The CLI calls :func:`configure` once its ``--log-*`` options are parsed.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "CaptchaScout"

# rotate the crawl log at 5 MB, keep three old files
_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _stderr_handler(fmt: str) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _rotating_handler(path: Path | str, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set level and handlers of the ``CaptchaScout`` logger.

    Parameters
    ----------
    level
        Threshold for crawl messages; page failures are WARNING, script
        fetch failures DEBUG, the crawl summary INFO.
    log_file
        Extra destination with rotation; stderr output is always kept.
    log_format
        :class:`logging.Formatter` pattern shared by all handlers.
    replace_handlers
        Close and drop handlers from an earlier call first.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        for handler in list(lg.handlers):
            handler.close()
        lg.handlers.clear()

    lg.addHandler(_stderr_handler(log_format))
    if log_file is not None:
        lg.addHandler(_rotating_handler(log_file, log_format))

    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "WARNING",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Quiet stderr-only setup applied on import; library callers may call it again."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
