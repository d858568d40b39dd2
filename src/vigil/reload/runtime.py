"""Shared state for one app's reload feature, built once at startup."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from vigil.config import VigilConfig
from vigil.reload.websocket import ConnectionManager
from vigil.watching import ChangeDetector, ChangeEvent, Watermark, watch_roots_for

# Delay between the "connected" ack and the first scan (seconds)
STARTUP_DELAY = 1.0

MAX_CONSECUTIVE_ERRORS = 5


@dataclass
class VigilRuntime:
    """Everything the routes, sessions, and middleware need.

    Passed explicitly (via app.state) instead of looked up from globals.
    The watermark is shared by every session of this runtime.
    """

    config: VigilConfig
    watermark: Watermark
    detector: ChangeDetector
    connections: ConnectionManager = field(default_factory=ConnectionManager)
    startup_delay: float = STARTUP_DELAY
    max_errors: int = MAX_CONSECUTIVE_ERRORS
    last_event: ChangeEvent | None = None

    @property
    def environment(self) -> str:
        return self.config.environment

    @property
    def project_root(self) -> Path:
        return Path(self.config.project_root)


def create_runtime(config: VigilConfig) -> VigilRuntime:
    """Build the watermark and detector for config's watch roots."""
    watermark = Watermark()
    detector = ChangeDetector(watch_roots_for(config.project_root, config.watch_roots), watermark)
    return VigilRuntime(config=config, watermark=watermark, detector=detector)
