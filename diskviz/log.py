from __future__ import annotations
import logging
import os
from typing import Optional

LOGGER_NAME = "diskviz"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 10,
}

_handler: Optional[logging.Handler] = None

def parse_level(value: Optional[str], default: str = "warning") -> int:
    if not value:
        return _LEVELS[default]
    v = value.strip().lower()
    if v == "warn":
        v = "warning"
    if v in ("none", "disabled", "0"):
        v = "off"
    return _LEVELS.get(v, _LEVELS[default])

def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    ``level`` wins over ``DISKVIZ_LOG_LEVEL``; calling again only changes the level.
    """
    global _handler
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(parse_level(level or os.getenv("DISKVIZ_LOG_LEVEL")))
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(_handler)
    return log
