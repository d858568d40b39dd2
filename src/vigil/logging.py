"""Logging configuration for Vigil.

Uses Python's standard logging module with support for:
- File logging via config or VIGIL_LOG environment variable
- Level names from config.log_level or VIGIL_LOG_LEVEL
- Stderr fallback when no log file is configured
"""

from __future__ import annotations

import logging
import os
import sys

# Module-level logger
logger = logging.getLogger("vigil")

_initialized = False

# Map string level names to logging constants
_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class _LowercaseLevelFormatter(logging.Formatter):
    """Formatter that emits lowercase level names."""

    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        return super().format(record)


def parse_level(level: str | None) -> int:
    """Translate a level name into a logging constant, defaulting to INFO."""
    if not level:
        return logging.INFO
    return _LEVEL_MAP.get(level.upper(), logging.INFO)


def setup_logging(level: str | None = None, file: str | None = None) -> None:
    """Initialize the vigil logger.

    Call this once at startup. Subsequent calls are no-ops.

    Args:
        level: Level name (debug, info, warning, error).
        file: Optional log file path. Falls back to VIGIL_LOG.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    log_level = parse_level(level)
    logger.setLevel(log_level)

    # Format: HH:MM:SS level: message
    formatter = _LowercaseLevelFormatter(
        "%(asctime)s %(levelname)s: %(message)s", datefmt="%H:%M:%S"
    )

    log_path = file or os.environ.get("VIGIL_LOG")

    if log_path:
        log_path = os.path.expanduser(log_path)
        try:
            file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            print(f"[vigil] Failed to open log file: {e}", file=sys.stderr)
            _add_stderr_handler(formatter, log_level)
    else:
        _add_stderr_handler(formatter, log_level)


def _add_stderr_handler(formatter: logging.Formatter, level: int = logging.DEBUG) -> None:
    """Add a stderr handler to the logger."""
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Optional name for a child logger (e.g., "watching", "reload").
              If None, returns the root vigil logger.

    Returns:
        A configured logger instance.
    """
    if name:
        return logger.getChild(name)
    return logger
