"""Configuration management for Vigil.

Resolves a single immutable VigilConfig at startup from:
- Project-level config ($project_root/vigil.yaml)
- Environment variable overrides (VIGIL_*)
- Packaged manifest defaults (vigil/static/manifest.yaml)

Example usage:
    from vigil.config import load_config

    config = load_config(project_root="/path/to/project")
    print(config.refresh_interval, config.environment)
"""

from vigil.config.loader import (
    ConfigError,
    get_config,
    load_config,
    reset_config,
)
from vigil.config.paths import (
    get_manifest_path,
    get_project_config_path,
    get_static_dir,
)
from vigil.config.schema import DEFAULT_WATCH_ROOTS, VigilConfig

__all__ = [
    # Main API
    "VigilConfig",
    "ConfigError",
    "load_config",
    "get_config",
    "reset_config",
    "DEFAULT_WATCH_ROOTS",
    # Path utilities
    "get_static_dir",
    "get_manifest_path",
    "get_project_config_path",
]
