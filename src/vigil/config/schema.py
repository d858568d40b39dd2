"""Configuration schema for Vigil.

The resolved config is an immutable snapshot built once at startup and
passed explicitly to the components that need it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

# Directories polled for changes, relative to the project root
DEFAULT_WATCH_ROOTS: tuple[str, ...] = (
    "templates",  # Template files
    "public/css",  # CSS files
    "public/js",  # JavaScript files
    "src/assets",  # Source assets (SCSS, TS, etc.)
)


@dataclass(frozen=True)
class VigilConfig:
    """Resolved Vigil configuration.

    Example vigil.yaml:
        settings:
          environment: dev
        vigil:
          refresh_interval: 250
          cooldown_period: 1000
          watch_roots:
            - templates
            - static
    """

    enabled: bool = True  # VIGIL_DISABLE=true turns the feature off in dev
    template_hot_reload: bool = True  # Scan and push reloads
    refresh_interval: int = 1000  # Milliseconds between scans
    cooldown_period: int = 3000  # Milliseconds to wait after a reload message
    log_level: str = "info"
    log_file: str | None = None
    environment: str = "prod"  # "dev" activates the feature
    project_root: str = "."
    watch_roots: tuple[str, ...] = field(default=DEFAULT_WATCH_ROOTS)

    @property
    def is_dev(self) -> bool:
        return self.environment == "dev"

    @property
    def refresh_seconds(self) -> float:
        return self.refresh_interval / 1000

    @property
    def cooldown_seconds(self) -> float:
        return self.cooldown_period / 1000

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict (watch_roots as a list)."""
        data = asdict(self)
        data["watch_roots"] = list(self.watch_roots)
        return data
