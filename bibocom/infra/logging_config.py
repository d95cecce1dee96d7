"""Logging setup shared by the clients, controllers and scheduler."""

from __future__ import annotations

import logging
from typing import Optional

from bibocom.config import get_settings

ROOT_LOGGER_NAME = "bibocom"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class LoggingConfig:
    """Configure the ``bibocom`` logger hierarchy once per process."""

    _configured = False

    def __init__(self, level: Optional[str] = None) -> None:
        level_name = (level or get_settings().log_level or "INFO").upper()
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(getattr(logging, level_name, logging.INFO))
        if not LoggingConfig._configured:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(handler)
            LoggingConfig._configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``bibocom.<name>``, or the package logger when no name is given."""
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
