# === FILE: sitesweep/logger.py ===
"""Логгер ``SiteSweep``: stdout плюс, по желанию, файл с ротацией.

Modules take a child via :func:`get_logger`; the CLI calls :func:`configure`
once the ``--log-*`` options are known.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteSweep"

_LevelT = Union[int, str]


def _file_handler(file: Path | str) -> RotatingFileHandler:
    return RotatingFileHandler(filename=str(file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")


def configure(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Replace the handlers of the ``SiteSweep`` logger; children inherit them."""
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    lg.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(_file_handler(log_file))
    for handler in handlers:
        handler.setFormatter(logging.Formatter(log_format))
        lg.addHandler(handler)

    lg.propagate = False
    return lg


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(LOGGER_NAME if not name else f"{LOGGER_NAME}.{name}")


logger: logging.Logger = configure()

__all__ = ["logger", "configure", "get_logger", "DEFAULT_FORMAT", "LOGGER_NAME"]
