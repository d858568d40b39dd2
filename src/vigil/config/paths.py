"""Configuration and package data path resolution.

Handles:
- Project: $project_root/vigil.yaml
- Packaged: vigil/static/manifest.yaml (defaults, also served as-is)
"""

from __future__ import annotations

from pathlib import Path

CONFIG_FILENAME = "vigil.yaml"
MANIFEST_FILENAME = "manifest.yaml"


def get_static_dir() -> Path:
    """Get the path to the packaged static files directory."""
    return Path(__file__).parent.parent / "static"


def get_manifest_path() -> Path:
    """Get the path to the packaged manifest holding config defaults."""
    return get_static_dir() / MANIFEST_FILENAME


def get_project_config_path(project_root: str | Path) -> Path:
    """Get project-level config path.

    Args:
        project_root: The project directory being served.

    Returns:
        Path to project config file (may not exist).
    """
    return Path(project_root) / CONFIG_FILENAME
