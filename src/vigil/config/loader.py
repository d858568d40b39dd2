"""Configuration file loading and caching.

Handles:
- YAML file parsing (project vigil.yaml, packaged manifest defaults)
- Environment variable overrides
- Layer merging with explicit > environment > packaged > built-in precedence
- Conversion from dict to the frozen VigilConfig dataclass
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from vigil.config.paths import get_manifest_path, get_project_config_path
from vigil.config.schema import DEFAULT_WATCH_ROOTS, VigilConfig

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("vigil.config")

# Global cached config
_cached_config: VigilConfig | None = None

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}

# Environment variable -> (config key, kind)
_ENV_KEYS: dict[str, tuple[str, str]] = {
    "VIGIL_TEMPLATE_HOT_RELOAD": ("template_hot_reload", "bool"),
    "VIGIL_REFRESH_INTERVAL": ("refresh_interval", "int"),
    "VIGIL_COOLDOWN_PERIOD": ("cooldown_period", "int"),
    "VIGIL_LOG_LEVEL": ("log_level", "str"),
    "VIGIL_LOG": ("log_file", "str"),
    "VIGIL_ENV": ("environment", "str"),
}

_BOOL_KEYS = {"enabled", "template_hot_reload"}
_INT_KEYS = {"refresh_interval", "cooldown_period"}
_STR_KEYS = {"log_level", "log_file", "environment", "project_root"}


class ConfigError(ValueError):
    """An explicitly declared config value is unusable."""


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML as dict, or empty dict on error.
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def _parse_bool(value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    return None


def manifest_defaults(path: Path | None = None) -> dict[str, Any]:
    """Read `config.defaults` from the packaged manifest.

    Falls back to top-level keys for manifests without a config section.
    """
    manifest = load_yaml_file(path or get_manifest_path())
    config_section = manifest.get("config")
    if isinstance(config_section, dict):
        defaults = config_section.get("defaults")
        if isinstance(defaults, dict):
            return dict(defaults)

    known = _BOOL_KEYS | _INT_KEYS | _STR_KEYS
    return {k: v for k, v in manifest.items() if k in known}


def env_overrides(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Build config dict from VIGIL_* environment variables.

    Values that don't parse are ignored with a warning so a typo in the
    shell never prevents startup.
    """
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}

    for var, (key, kind) in _ENV_KEYS.items():
        raw = env.get(var)
        if raw is None or raw == "":
            continue
        if kind == "bool":
            parsed = _parse_bool(raw)
            if parsed is None:
                _log.warning("Ignoring %s=%r: expected true/false", var, raw)
                continue
            overrides[key] = parsed
        elif kind == "int":
            try:
                overrides[key] = int(raw)
            except ValueError:
                _log.warning("Ignoring %s=%r: expected an integer", var, raw)
        else:
            overrides[key] = raw

    disable = env.get("VIGIL_DISABLE")
    if disable and _parse_bool(disable):
        overrides["enabled"] = False

    return overrides


def project_settings(project_root: str | Path, config_path: Path | None = None) -> dict[str, Any]:
    """Read the explicit layer from the project's vigil.yaml.

    The `vigil:` section holds feature settings and `settings.environment`
    holds the environment discriminator.
    """
    data = load_yaml_file(config_path or get_project_config_path(project_root))
    explicit: dict[str, Any] = {}

    section = data.get("vigil")
    if isinstance(section, dict):
        explicit.update(section)

    settings = data.get("settings")
    if isinstance(settings, dict) and settings.get("environment"):
        explicit["environment"] = settings["environment"]

    return explicit


def merge_layers(*layers: dict[str, Any]) -> dict[str, Any]:
    """Merge layers in order, later overriding earlier.

    None values never override, so partial layers leave keys unset.
    """
    result: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            if value is not None:
                result[key] = value
    return result


def dict_to_config(data: dict[str, Any]) -> VigilConfig:
    """Convert a merged dict to a validated VigilConfig.

    Raises:
        ConfigError: If a value has the wrong type or is out of range.
    """
    values: dict[str, Any] = {}

    for key in _BOOL_KEYS:
        if key in data:
            value = data[key]
            if isinstance(value, str):
                value = _parse_bool(value)
            if not isinstance(value, bool):
                raise ConfigError(f"{key} must be a boolean, got {data[key]!r}")
            values[key] = value

    for key in _INT_KEYS:
        if key in data:
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{key} must be an integer (milliseconds), got {value!r}")
            values[key] = value

    for key in _STR_KEYS:
        if key in data:
            values[key] = str(data[key])

    roots = data.get("watch_roots")
    if roots is not None:
        if not isinstance(roots, list) or not all(isinstance(r, str) for r in roots):
            raise ConfigError(f"watch_roots must be a list of paths, got {roots!r}")
        values["watch_roots"] = tuple(roots)

    if values.get("refresh_interval", 1) <= 0:
        raise ConfigError("refresh_interval must be positive")
    if values.get("cooldown_period", 0) < 0:
        raise ConfigError("cooldown_period must not be negative")

    return VigilConfig(**values)


def load_config(
    project_root: str | Path = ".",
    config_path: Path | None = None,
    reload: bool = False,
    **explicit: Any,
) -> VigilConfig:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Keyword overrides passed here
    2. Project config ($project_root/vigil.yaml or config_path)
    3. VIGIL_* environment variables
    4. Packaged manifest defaults
    5. VigilConfig field defaults

    Args:
        project_root: Project directory being served.
        config_path: Explicit config file instead of $project_root/vigil.yaml.
        reload: Force reload even if cached.
        **explicit: Highest-priority overrides (e.g. environment="dev").

    Returns:
        The resolved VigilConfig.
    """
    global _cached_config

    if _cached_config is not None and not reload:
        return _cached_config

    merged = merge_layers(
        {"project_root": str(project_root), "watch_roots": list(DEFAULT_WATCH_ROOTS)},
        manifest_defaults(),
        env_overrides(),
        project_settings(project_root, config_path),
        explicit,
    )
    config = dict_to_config(merged)

    _log.info(
        "Vigil config loaded: template_hot_reload=%s, refresh_interval=%dms, cooldown_period=%dms",
        config.template_hot_reload,
        config.refresh_interval,
        config.cooldown_period,
    )

    _cached_config = config
    return config


def get_config() -> VigilConfig:
    """Get the cached config, loading it from the current directory if needed."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Reset cached config.

    Useful for testing or forcing a reload.
    """
    global _cached_config
    _cached_config = None
