"""Console logging setup for the fluxchart loggers."""
from __future__ import annotations

import logging

_logger = logging.getLogger("fluxchart")


def configure_logging(level: str = "INFO") -> None:
    """Attach a console handler once and set the package log level."""
    if not _logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s][%(name)s] %(message)s"))
        _logger.addHandler(handler)
    set_log_level(level)


def set_log_level(level: str) -> None:
    """Set package log level (DEBUG/INFO/WARNING/ERROR)."""
    level_name = (level or "INFO").upper()
    _logger.setLevel(getattr(logging, level_name, logging.INFO))


def get_log_level() -> str:
    return logging.getLevelName(_logger.level)
