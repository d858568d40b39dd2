"""Tests for the shared watermark."""

import threading
import time

from vigil.watching import Watermark


class TestWatermark:
    def test_starts_at_zero(self) -> None:
        assert Watermark().load() == 0

    def test_store_and_load(self) -> None:
        watermark = Watermark()
        watermark.store(123)
        assert watermark.load() == 123

    def test_reset_to_now(self) -> None:
        watermark = Watermark(5)
        before = int(time.time())
        value = watermark.reset_to_now()
        after = int(time.time())

        assert before <= value <= after
        assert watermark.load() == value

    def test_advance_only_moves_forward(self) -> None:
        watermark = Watermark(100)

        assert watermark.advance(150) is True
        assert watermark.load() == 150
        assert watermark.advance(150) is False
        assert watermark.advance(120) is False
        assert watermark.load() == 150

    def test_concurrent_advance_reports_each_value_once(self) -> None:
        """Racing threads offering the same value: exactly one wins."""
        watermark = Watermark(0)
        wins: list[bool] = []
        lock = threading.Lock()
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            result = watermark.advance(42)
            with lock:
                wins.append(result)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert wins.count(True) == 1
        assert watermark.load() == 42
