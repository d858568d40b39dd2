"""Packaged client payloads served by the reload routes."""

from __future__ import annotations

from functools import lru_cache

from vigil.config.paths import get_manifest_path, get_static_dir

DEV_RELOAD_SCRIPT = "dev-reload.js"
INJECTOR_SCRIPT = "injector.js"
INJECT_SCRIPT = "inject.js"


@lru_cache(maxsize=None)
def read_asset(name: str) -> str:
    """Read a file from the packaged static directory."""
    return (get_static_dir() / name).read_text(encoding="utf-8")


def dev_reload_js() -> str:
    """Client that connects to the reload socket and refreshes the page."""
    return read_asset(DEV_RELOAD_SCRIPT)


def injector_js() -> str:
    """Adds the dev-reload script tag unless the page already has it."""
    return read_asset(INJECTOR_SCRIPT)


def inject_js() -> str:
    """Probes the page's headers and loads dev-reload only when advertised."""
    return read_asset(INJECT_SCRIPT)


def manifest_text() -> str:
    return get_manifest_path().read_text(encoding="utf-8")
