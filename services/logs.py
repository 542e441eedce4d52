"""
Lightweight logging setup (soulpet.log).

Modules log through logging.getLogger(__name__); setup_logging() builds one
file handler and one stream handler and shares them between the "services"
and "main" loggers, once per process.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional

LOGGER_NAMES = ("services", "main")
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def _build_handlers(log_path: str) -> List[logging.Handler]:
    fmt = logging.Formatter(LOG_FORMAT)
    fh = logging.FileHandler(log_path, encoding="utf-8")
    sh = logging.StreamHandler()
    fh.setFormatter(fmt)
    sh.setFormatter(fmt)
    return [fh, sh]


def setup_logging(log_path: str = "soulpet.log", level: Optional[str] = None) -> logging.Logger:
    """
    Configure logging for the app. Safe to call more than once.

    The level comes from the argument, else SOULPET_LOG_LEVEL, else INFO.
    Handlers already attached by an earlier call are reused.
    """
    level_name = (level or os.environ.get("SOULPET_LOG_LEVEL") or "INFO").upper()
    loggers = [logging.getLogger(name) for name in LOGGER_NAMES]
    handlers: List[logging.Handler] = []
    for logger in loggers:
        for h in logger.handlers:
            if h not in handlers:
                handlers.append(h)
    if not handlers:
        handlers = _build_handlers(log_path)

    for logger in loggers:
        logger.setLevel(getattr(logging, level_name, logging.INFO))
        for h in handlers:
            if h not in logger.handlers:
                logger.addHandler(h)
        logger.propagate = False
    return logging.getLogger("main")
