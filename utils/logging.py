"""
utils/logging.py — Logging setup for Spot the Difference.

Modules log through the standard library with
logging.getLogger(__name__). main.py calls setup_logging() once before
the window opens; the handlers hang off the root logger so core/,
levels/ and utils/ loggers all inherit them.

Usage:
    from utils.logging import setup_logging
    setup_logging()                         # settings.LOG_LEVEL / LOG_FILE
    setup_logging("DEBUG", "spotdiff.log")  # explicit
"""

from __future__ import annotations

import logging
import sys

from settings import LOG_FILE, LOG_FORMAT, LOG_LEVEL


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    """Configure console (stderr) and optional file logging.

    Args:
        level:    Level name. Defaults to settings.LOG_LEVEL.
        log_file: Optional path for a file handler. Defaults to settings.LOG_FILE.
    """
    level = level or LOG_LEVEL
    log_file = log_file or LOG_FILE

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.info("Logging initialized at %s level", level.upper())
