"""WebSocket connection tracking for reload clients."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi import WebSocket

log = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks open reload sockets so they can be counted and closed on shutdown."""

    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a new reload connection."""
        await websocket.accept()
        async with self._lock:
            self._connections.add(websocket)
        log.debug("Reload client connected (%d open)", len(self._connections))

    async def disconnect(self, websocket: WebSocket) -> None:
        """Forget a reload connection."""
        async with self._lock:
            self._connections.discard(websocket)
        log.debug("Reload client disconnected (%d open)", len(self._connections))

    def get_connection_count(self) -> int:
        return len(self._connections)

    async def close_all(self, reason: str = "Server shutting down") -> None:
        """Close all reload connections gracefully."""
        async with self._lock:
            connections = list(self._connections)
            self._connections.clear()

        for websocket in connections:
            with contextlib.suppress(Exception):
                await websocket.close(code=1001, reason=reason)
        log.info("Closed %d reload connections", len(connections))
