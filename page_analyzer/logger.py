# === FILE: page_analyzer/logger.py ===
"""Logging setup for **Page Analyzer**.

Every module takes a child of the ``PageAnalyzer`` logger::

    from page_analyzer.logger import get_logger
    log = get_logger("repository")      # -> "PageAnalyzer.repository"

The CLI calls :func:`configure` once before the application context is
built. Console output goes to stderr because stdout carries command output
(JSON). The aiohttp server/access loggers share the project handlers, so
``serve`` writes requests and application events to one stream.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterable, List, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "PageAnalyzer"

#: third-party loggers routed through the project handlers
SERVER_LOGGERS: Final[tuple[str, ...]] = ("aiohttp.access", "aiohttp.server", "aiohttp.web")

LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def build_handlers(log_format: str, log_file: str | Path | None = None) -> List[logging.Handler]:
    """stderr handler, plus a rotating file handler when *log_file* is given."""
    formatter = logging.Formatter(log_format)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def _attach(lg: logging.Logger, handlers: Iterable[logging.Handler], level: _LevelT) -> None:
    for old in list(lg.handlers):
        lg.removeHandler(old)
        old.close()
    for handler in handlers:
        lg.addHandler(handler)
    lg.setLevel(level)
    lg.propagate = False


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Install fresh handlers on the project logger and the aiohttp server loggers.

    Previously installed handlers are closed, so repeated calls (one per
    CLI invocation) do not duplicate output.
    """
    handlers = build_handlers(log_format, log_file)
    project = logging.getLogger(LOGGER_NAME)
    _attach(project, handlers, level)
    for name in SERVER_LOGGERS:
        _attach(logging.getLogger(name), handlers, level)
    return project


def get_logger(name: str | None = None) -> logging.Logger:
    """Child logger of the project logger (``PageAnalyzer.<name>``)."""
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


configure()

__all__ = ["configure", "get_logger", "build_handlers", "DEFAULT_FORMAT", "LOGGER_NAME"]
