"""
Logging setup for signtrainer.

Library modules only call `get_logger`; applications call `setup_logging`
once to attach a console handler.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .config import LOGGER_NAME


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or a named child of it."""
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def setup_logging(debug: bool = False) -> logging.Logger:
    """
    Configure and return the application logger.

    Args:
        debug: Enable debug-level logging (per-frame decisions) if True.

    Returns:
        The configured `signtrainer` logger.
    """
    logger = get_logger()
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger
