"""
Logging configuration for stylus-ink-bench.

Library modules log through ``get_logger(__name__)``-style child loggers of
``stylus_ink_bench``; only the CLI installs a handler.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import click

LOGGER_NAME = "stylus_ink_bench"


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name when writing to a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "bright_black",
        logging.INFO: "cyan",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "bright_red",
    }

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_colors:
            return message
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return message
        prefix = f"{record.levelname}:"
        if message.startswith(prefix):
            return click.style(prefix, fg=color) + message[len(prefix):]
        return message


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbose: Log RPC traffic and pipeline details (DEBUG)
        quiet: Suppress console logging entirely

    Returns:
        The configured package logger
    """
    level = logging.DEBUG if verbose else logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    if quiet:
        logger.addHandler(logging.NullHandler())
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    supports_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
    handler.setFormatter(
        ColoredFormatter(fmt="%(levelname)s: %(message)s", use_colors=supports_color)
    )
    logger.addHandler(handler)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or a child of it for ``name``."""
    if not name:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
