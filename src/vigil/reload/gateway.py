"""Attach Vigil to a FastAPI app.

The decision is made once, at startup. Outside the dev environment nothing
is attached at all, so production apps pay no per-request cost.
"""

from __future__ import annotations

from fastapi import FastAPI

from vigil.config import VigilConfig
from vigil.logging import get_logger
from vigil.reload.middleware import VigilHeadersMiddleware
from vigil.reload.routes import router
from vigil.reload.runtime import VigilRuntime, create_runtime

log = get_logger("gateway")


def is_active(config: VigilConfig) -> bool:
    """Vigil runs only in the dev environment and when not disabled."""
    return config.is_dev and config.enabled


def attach_vigil(app: FastAPI, config: VigilConfig) -> VigilRuntime | None:
    """Mount the reload routes and header middleware when active.

    Args:
        app: The host application. Must not have started yet.
        config: Resolved configuration.

    Returns:
        The runtime stored on app.state.vigil, or None when inactive.
    """
    if not is_active(config):
        if config.is_dev:
            log.info("Vigil: disabled by configuration")
        else:
            log.info("Vigil: %s environment detected - hot reload disabled", config.environment)
        return None

    log.info("Vigil: development mode detected - enabling hot reload")

    runtime = create_runtime(config)
    app.state.vigil = runtime
    app.include_router(router)
    app.add_middleware(VigilHeadersMiddleware, runtime=runtime)

    for root in runtime.detector.roots:
        if not root.path.is_dir():
            log.debug("Watch root %s does not exist yet", root.path)

    return runtime
