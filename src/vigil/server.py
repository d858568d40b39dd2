"""Standalone development server: static files plus Vigil."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from vigil.config import VigilConfig
from vigil.logging import parse_level
from vigil.reload import attach_vigil

log = logging.getLogger(__name__)


def create_app(config: VigilConfig, static_dir: str | Path | None = None) -> FastAPI:
    """Create a FastAPI app serving static_dir with Vigil attached.

    Args:
        config: Resolved configuration; decides whether Vigil is active.
        static_dir: Directory to serve at "/". Defaults to the project root.
    """

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        runtime = getattr(app.state, "vigil", None)
        if runtime is not None:
            await runtime.connections.close_all("Server shutting down")

    app = FastAPI(
        title="Vigil Dev Server",
        description="Static file server with live reload",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Routes must be registered before the catch-all static mount
    attach_vigil(app, config)

    root = Path(static_dir) if static_dir is not None else Path(config.project_root)
    if root.is_dir():
        app.mount("/", StaticFiles(directory=str(root), html=True), name="static")
    else:
        log.warning("Static directory %s does not exist, serving Vigil routes only", root)

    return app


def run_server(
    config: VigilConfig,
    host: str = "127.0.0.1",
    port: int = 8000,
    static_dir: str | Path | None = None,
) -> None:
    """Serve the app with uvicorn until interrupted."""
    # Import here to avoid startup overhead for the other commands
    import uvicorn

    app = create_app(config, static_dir)

    uvicorn_config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level=logging.getLevelName(parse_level(config.log_level)).lower(),
        access_log=False,
    )
    server = uvicorn.Server(uvicorn_config)

    log.info("Vigil dev server on http://%s:%d (%s)", host, port, config.environment)
    server.run()
