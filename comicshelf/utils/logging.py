"""Application logging helpers.

Configures the ``comicshelf`` logger once (level from ``LOG_LEVEL``, a single
stream handler) and hands out child loggers that propagate to it.
"""
from __future__ import annotations

import logging
import threading

from comicshelf import config as app_config

ROOT_LOGGER_NAME = "comicshelf"

_LOCK = threading.Lock()
_CONFIGURED = False


def _configure_root() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return
    with _LOCK:
        if _CONFIGURED:
            return
        root = logging.getLogger(ROOT_LOGGER_NAME)
        level = getattr(logging, app_config.log_level_name(), logging.INFO)
        root.setLevel(level)
        if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("[comicshelf] %(asctime)s %(levelname)s %(name)s %(message)s")
            )
            root.addHandler(handler)
        root.propagate = False
        _CONFIGURED = True


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    _configure_root()
    return logging.getLogger(name)


__all__ = ["get_logger"]
