"""Logging setup."""

import logging
import os
from typing import Optional


def configure_logging(level: Optional[str] = None) -> None:
    """Configure logging for CLI runs.

    The level falls back to BETRISK_LOG_LEVEL, then INFO.
    """
    level_name = (level or os.environ.get("BETRISK_LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    logging.basicConfig(level=log_level, format=fmt, datefmt="%H:%M:%S", force=True)
