"""Shared modification-time watermark.

Scans run on executor threads, so every access goes through a lock.
"""

from __future__ import annotations

import threading
import time


class Watermark:
    """Most recent modification time (whole seconds) already reported.

    One instance is shared by every session of a running app. Only
    reset_to_now() moves it backwards, and only when a new session starts.
    """

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._lock = threading.Lock()

    def load(self) -> int:
        with self._lock:
            return self._value

    def store(self, value: int) -> None:
        with self._lock:
            self._value = value

    def reset_to_now(self) -> int:
        """Set the watermark to the current time so older changes are ignored.

        Returns:
            The new watermark value.
        """
        now = int(time.time())
        with self._lock:
            self._value = now
        return now

    def advance(self, candidate: int) -> bool:
        """Move the watermark to candidate if it is strictly newer.

        Returns:
            True if the watermark moved.
        """
        with self._lock:
            if candidate > self._value:
                self._value = candidate
                return True
            return False

    def __repr__(self) -> str:
        return f"Watermark({self.load()})"
