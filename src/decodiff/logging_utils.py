"""Logging configuration utilities for decodiff."""

import logging
import os
from typing import Optional

_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure application-wide logging once."""
    root = logging.getLogger()
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if root.handlers:
        if level:
            root.setLevel(log_level)
        return

    logging.basicConfig(level=log_level, format=_LOG_FORMAT)
