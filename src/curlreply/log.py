"""Logging helpers for the ``curlreply`` logger namespace.

Library modules log through ``logging.getLogger(__name__)`` and never install
handlers themselves; ``configure_logging`` is for applications and the CLI.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

BASE_LOGGER = "curlreply"
LEVEL_ENV_VAR = "CURLREPLY_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s: %(message)s"


def coerce_level(value: str | int | None, fallback: int = logging.WARNING) -> int:
    if value is None:
        return fallback
    if isinstance(value, int):
        return value
    text = value.strip()
    if not text:
        return fallback
    if text.isdigit():
        return int(text)
    candidate = logging.getLevelName(text.upper())
    return candidate if isinstance(candidate, int) else fallback


def configure_logging(level: str | int | None = None, stream: TextIO | None = None) -> logging.Logger:
    """Configure the base ``curlreply`` logger and return it.

    Args:
        level: Explicit level; when None, ``CURLREPLY_LOG_LEVEL`` is consulted
        stream: Output stream (stderr by default)

    Returns:
        The configured base logger. Repeated calls only update the level.
    """
    if level is None:
        level = os.getenv(LEVEL_ENV_VAR)
    resolved = coerce_level(level)

    base = logging.getLogger(BASE_LOGGER)
    base.setLevel(resolved)
    if base.handlers:
        return base

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    base.addHandler(handler)
    base.propagate = False
    return base


def get_logger(name: str | None = None) -> logging.Logger:
    if not name or name == BASE_LOGGER:
        return logging.getLogger(BASE_LOGGER)
    if name.startswith(BASE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{BASE_LOGGER}.{name}")
