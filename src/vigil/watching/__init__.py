"""File watching module for Vigil.

Provides polling-based change detection over a fixed set of watch roots,
coordinated through a shared modification-time watermark.
"""

from vigil.watching.detector import (
    WATCHED_EXTENSIONS,
    ChangeCategory,
    ChangeDetector,
    ChangeEvent,
    WatchRoot,
    categorize,
    watch_roots_for,
)
from vigil.watching.watermark import Watermark

__all__ = [
    "WATCHED_EXTENSIONS",
    "ChangeCategory",
    "ChangeDetector",
    "ChangeEvent",
    "WatchRoot",
    "Watermark",
    "categorize",
    "watch_roots_for",
]
