"""Centralized logging configuration shared by the driver and the endpoint."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "SPEEDTEST_LOG_LEVEL"


def configure_logging(level: Optional[str] = None, default: str = "WARNING") -> None:
    """Send log records to stderr.

    The level comes from *level*, then the ``SPEEDTEST_LOG_LEVEL``
    environment variable, then *default*.  stdout stays free for the JSON
    report.
    """
    name = (level or os.environ.get(LOG_LEVEL_ENV) or default).upper()
    log_level = getattr(logging, name, None)
    if not isinstance(log_level, int):
        log_level = logging.getLevelName(default.upper())

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
