# invitelib/logs.py
from __future__ import annotations

import logging
import os
from typing import Optional

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_level(level: Optional[str]) -> int:
    """LOG_LEVEL string -> logging level. Unknown values fall back to INFO."""
    return _LEVELS.get((level or "").strip().lower(), logging.INFO)


def setup_logging(app_name: str, level: Optional[str] = None) -> logging.Logger:
    if level is None:
        level = os.getenv("LOG_LEVEL", "info")
    logging.basicConfig(
        level=parse_level(level),
        format=f"%(asctime)s | %(levelname)s | {app_name} | %(message)s",
    )
    return logging.getLogger(app_name)
