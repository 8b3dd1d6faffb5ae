"""Logging setup for the rental service."""
import logging
import sys

from infrastructure.config import LOG_LEVEL

_LOGGER_PREFIX = "vehicle_rental"
_FORMAT = "ts=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the vehicle_rental namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """Install a single stream handler on the root service logger.

    Safe to call more than once; the handler is only added the first time.
    """
    root = logging.getLogger(_LOGGER_PREFIX)
    root.setLevel(level.upper())
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    return root
