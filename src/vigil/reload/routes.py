"""FastAPI routes for the reload socket, client scripts, and status pages."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, WebSocket
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from starlette.requests import HTTPConnection

from vigil.reload import assets
from vigil.reload.runtime import VigilRuntime
from vigil.reload.session import ReloadSession, SessionState
from vigil.reload.status import get_status_data, render_status_page

log = logging.getLogger(__name__)

JAVASCRIPT = "application/javascript"

router = APIRouter()


def get_runtime(connection: HTTPConnection) -> VigilRuntime:
    """Resolve the runtime attached to the app at startup.

    Works for both HTTP requests and WebSocket connections.
    """
    return connection.app.state.vigil


@router.websocket("/ws/dev/reload")
async def reload_websocket(
    websocket: WebSocket, runtime: VigilRuntime = Depends(get_runtime)
) -> None:
    """Push reload notifications to one browser tab."""
    await runtime.connections.connect(websocket)

    session = ReloadSession(websocket, runtime, max_errors=runtime.max_errors)
    try:
        await session.serve()
    finally:
        await runtime.connections.disconnect(websocket)

    if session.state is SessionState.CLOSING and session.consecutive_errors >= runtime.max_errors:
        try:
            await websocket.close(code=1011, reason="Change detection failing")
        except RuntimeError:
            log.debug("Reload socket already closed")


@router.get("/vigil/dev-reload.js")
async def dev_reload_script() -> Response:
    return Response(assets.dev_reload_js(), media_type=JAVASCRIPT)


@router.get("/vigil/injector.js")
async def injector_script() -> Response:
    return Response(assets.injector_js(), media_type=JAVASCRIPT)


@router.get("/vigil/inject.js")
async def inject_script() -> Response:
    return Response(assets.inject_js(), media_type=JAVASCRIPT)


@router.get("/vigil/manifest.yaml")
async def manifest() -> PlainTextResponse:
    return PlainTextResponse(assets.manifest_text())


@router.get("/vigil/status")
async def status_page(runtime: VigilRuntime = Depends(get_runtime)) -> HTMLResponse:
    """Human-readable status, itself decorated so the reload client loads."""
    return HTMLResponse(render_status_page(get_status_data(runtime)))


@router.get("/vigil/status.json")
async def status_json(runtime: VigilRuntime = Depends(get_runtime)) -> dict[str, Any]:
    return get_status_data(runtime)
