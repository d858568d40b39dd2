"""Per-connection notification loop.

Each reload client gets one ReloadSession. The session polls the change
detector on a timer and pushes text frames to its socket:

    connected            sent once, right after the watermark reset
    reload:<path>        a watched file changed
    ping                 occasional keepalive while nothing changes

States: CONNECTED -> POLLING <-> NOTIFYING -> CLOSING.
"""

from __future__ import annotations

import asyncio
import contextlib
import random
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING

from starlette.websockets import WebSocketDisconnect

from vigil.logging import get_logger
from vigil.reload.runtime import MAX_CONSECUTIVE_ERRORS

if TYPE_CHECKING:
    from fastapi import WebSocket

    from vigil.reload.runtime import VigilRuntime
    from vigil.watching import ChangeEvent

log = get_logger("reload")

# Roughly one ping every 25 idle cycles
PING_PROBABILITY = 10 / 256


class SessionState(Enum):
    CONNECTED = "connected"
    POLLING = "polling"
    NOTIFYING = "notifying"
    CLOSING = "closing"


class ReloadSession:
    """Drives one client's reload socket until it disconnects or fails.

    Timing values are read from runtime.config at every sleep so a swapped
    config takes effect on the next cycle.
    """

    def __init__(
        self,
        websocket: WebSocket,
        runtime: VigilRuntime,
        *,
        max_errors: int = MAX_CONSECUTIVE_ERRORS,
        ping_probability: float = PING_PROBABILITY,
        rng: Callable[[], float] = random.random,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._websocket = websocket
        self._runtime = runtime
        self._max_errors = max_errors
        self._ping_probability = ping_probability
        self._rng = rng
        self._sleep = sleep

        self.state = SessionState.CONNECTED
        self.consecutive_errors = 0
        self.messages_sent = 0

    async def serve(self) -> None:
        """Run the loop until it closes itself or the peer goes away."""
        poller = asyncio.create_task(self.run())
        listener = asyncio.create_task(self._listen())

        done, pending = await asyncio.wait(
            {poller, listener}, return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        self.state = SessionState.CLOSING
        for task in done:
            task.result()

    async def run(self) -> None:
        """The polling loop. Returns once the session reaches CLOSING."""
        runtime = self._runtime
        runtime.watermark.reset_to_now()

        if not await self._send("connected"):
            return

        # Let any scan already in flight land before the first poll
        await self._sleep(runtime.startup_delay)

        self.state = SessionState.POLLING
        while self.state is not SessionState.CLOSING:
            try:
                event = await self._dispatch_scan()
            except Exception as e:
                self.consecutive_errors += 1
                log.warning(
                    "Error checking for changes (%d/%d): %s",
                    self.consecutive_errors,
                    self._max_errors,
                    e,
                )
                if self.consecutive_errors >= self._max_errors:
                    log.warning("Too many consecutive errors, closing reload session")
                    self.state = SessionState.CLOSING
                    return
            else:
                # Only a detected change clears the error count
                if event is not None:
                    self.consecutive_errors = 0
                    if not await self._notify(event):
                        return

            if self.consecutive_errors == 0 and self._rng() < self._ping_probability:
                if not await self._send("ping"):
                    return

            await self._sleep(runtime.config.refresh_seconds)

    async def _dispatch_scan(self) -> ChangeEvent | None:
        """Run the detector on a worker thread so the socket stays responsive."""
        if not self._runtime.config.template_hot_reload:
            return None
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._runtime.detector.scan)

    async def _notify(self, event: ChangeEvent) -> bool:
        self.state = SessionState.NOTIFYING
        self._runtime.last_event = event
        log.info("%s changed: %s, sending reload signal", event.category.label, event.path)

        if not await self._send(event.message):
            return False

        # Swallow the rest of a multi-file save
        await self._sleep(self._runtime.config.cooldown_seconds)
        self.state = SessionState.POLLING
        return True

    async def _send(self, message: str) -> bool:
        """Send a text frame. Returns False (and closes) if the peer is gone."""
        try:
            await self._websocket.send_text(message)
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            log.debug("Reload client went away: %s", e)
            self.state = SessionState.CLOSING
            return False
        self.messages_sent += 1
        return True

    async def _listen(self) -> None:
        """Consume client frames until the socket closes."""
        while True:
            try:
                await self._websocket.receive_text()
            except KeyError:
                # Binary frame; clients only ever send text pings
                continue
            except (WebSocketDisconnect, RuntimeError):
                break
        log.debug("Reload client closed the connection")
