"""Shared test utilities for Vigil tests."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Any

from starlette.websockets import WebSocketDisconnect

from vigil.watching import ChangeEvent, categorize


def touch(path: Path, mtime: int, content: str = "") -> Path:
    """Create path (and parents) with a fixed modification time."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    os.utime(path, (mtime, mtime))
    return path


def make_event(path: str, mtime: int = 1000) -> ChangeEvent:
    return ChangeEvent(path=path, mtime=mtime, category=categorize(path))


class MockWebSocket:
    """Mock WebSocket recording sent frames.

    receive_text() blocks until disconnect() is called, then raises
    WebSocketDisconnect like a real peer closing the socket.
    """

    def __init__(self, fail_on: str | None = None, timeline: list[Any] | None = None):
        self.fail_on = fail_on
        self.timeline = timeline if timeline is not None else []
        self.accepted = False
        self.closed = False
        self.close_code: int | None = None
        self.sent: list[str] = []
        self._disconnected = asyncio.Event()

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, message: str) -> None:
        if self.fail_on is not None and message.startswith(self.fail_on):
            raise WebSocketDisconnect(code=1006)
        self.sent.append(message)
        self.timeline.append(("send", message))

    async def receive_text(self) -> str:
        await self._disconnected.wait()
        raise WebSocketDisconnect(code=1000)

    def disconnect(self) -> None:
        self._disconnected.set()

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.closed = True
        self.close_code = code


class ScriptedDetector:
    """Detector stand-in replaying a fixed list of scan outcomes.

    Each outcome is a ChangeEvent, None, or an exception to raise. Once the
    script runs out every scan raises, so sessions end by error escalation.
    """

    def __init__(self, outcomes: list[Any]):
        self._outcomes = list(outcomes)
        self.calls = 0
        self.roots: list[Any] = []

    def scan(self) -> ChangeEvent | None:
        self.calls += 1
        if not self._outcomes:
            raise RuntimeError("script exhausted")
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class SleepRecorder:
    """Replacement for asyncio.sleep that records durations instead of waiting."""

    def __init__(self, timeline: list[Any] | None = None, hook: Any = None):
        self.timeline = timeline if timeline is not None else []
        self.durations: list[float] = []
        self.hook = hook

    async def __call__(self, seconds: float) -> None:
        self.durations.append(seconds)
        self.timeline.append(("sleep", seconds))
        if self.hook is not None:
            self.hook(len(self.durations))
        await asyncio.sleep(0)
