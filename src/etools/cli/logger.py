"""Logging helpers for the e CLI."""

from __future__ import annotations

import logging
import os
import sys

import colorlog

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "bold_yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red,bg_white",
}

_FORMAT = "<%(name)s> %(levelname)s: %(message)s"

# Libraries whose INFO logs drown our own.
_NOISY_LOGGERS = ("urllib3", "requests")


def _use_color(stream) -> bool:
    if os.getenv("NO_COLOR") is not None:
        return False
    return stream.isatty()


def configure_logging(verbose: bool) -> None:
    """Log to stderr, using colors when it is a terminal."""
    level = logging.DEBUG if verbose else logging.INFO
    stream = sys.stderr
    handler = logging.StreamHandler(stream)
    if _use_color(stream):
        handler.setFormatter(
            colorlog.ColoredFormatter(
                fmt=f"%(log_color)s{_FORMAT}%(reset)s",
                log_colors=LOG_COLORS,
            )
        )
    else:
        handler.setFormatter(logging.Formatter(_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
