"""Vigil - development live reload for FastAPI apps.

Polls template, stylesheet, and script directories and tells connected
browser tabs to reload when something changes.
"""

from vigil.config import VigilConfig, load_config
from vigil.reload import attach_vigil

__version__ = "0.1.0"

__all__ = [
    "VigilConfig",
    "attach_vigil",
    "load_config",
]
