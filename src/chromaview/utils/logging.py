"""Logging helpers for chromaview.

Pipeline modules only call get_logger(__name__); the package logger carries a
NullHandler (see chromaview/__init__.py), so nothing is printed unless a host
routes it. Scripts call configure_logging() to get stderr output; the level
defaults to the CHROMAVIEW_LOG_LEVEL environment variable.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "chromaview"
LEVEL_ENV_VAR = "CHROMAVIEW_LOG_LEVEL"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """Attach one stderr handler to the "chromaview" logger (never root).

    Args:
        level: Level name or number. Defaults to $CHROMAVIEW_LOG_LEVEL, else INFO.
            Unknown names fall back to INFO.
        fmt: Record format. Defaults to DEFAULT_FMT.
        datefmt: Timestamp format. Defaults to DEFAULT_DATEFMT.
        force: Replace existing handlers instead of keeping a stderr handler
            that is already attached.
    """
    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR, "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    formatter = logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
                return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the named logger, or the package logger when name is None."""
    return logging.getLogger(name or LOGGER_NAME)
