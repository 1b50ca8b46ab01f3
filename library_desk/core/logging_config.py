"""Logging setup for the library_desk logger hierarchy."""

import logging
import sys
import threading
from typing import Optional

_LOGGER_PREFIX = "library_desk"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_lock = threading.Lock()
_configured = False


def configure_logging(level: str = "INFO", handler: Optional[logging.Handler] = None) -> None:
    """Attach a single stream handler to the library_desk logger (idempotent)."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(level.upper())

    h = handler if handler is not None else logging.StreamHandler(sys.stderr)
    h.setFormatter(logging.Formatter(_FORMAT))
    root_logger.addHandler(h)


def reset_logging() -> None:
    """Drop handlers installed by configure_logging. For tests."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
