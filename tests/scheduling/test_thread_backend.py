"""Tests for ThreadSchedulerBackend."""

import time
from datetime import datetime

from cadence.scheduling import ThreadSchedulerBackend


class TestThreadSchedulerBackend:
    """Test ThreadSchedulerBackend implementation."""

    def test_start_and_stop(self):
        """Backend starts and stops cleanly."""
        backend = ThreadSchedulerBackend()
        tick_count = 0

        def tick():
            nonlocal tick_count
            tick_count += 1

        backend.start(tick, interval_seconds=0.05)
        assert backend.is_running

        time.sleep(0.3)

        backend.stop()
        assert not backend.is_running
        assert tick_count >= 2

    def test_health_before_start(self):
        """Health returns unhealthy before start."""
        health = ThreadSchedulerBackend().health()

        assert health["healthy"] is False
        assert health["backend"] == "thread"
        assert health["tick_count"] == 0
        assert health["last_tick"] is None

    def test_health_after_start(self):
        backend = ThreadSchedulerBackend()
        backend.start(lambda: None, interval_seconds=0.05)
        time.sleep(0.2)

        health = backend.health()
        assert health["healthy"] is True
        assert health["tick_count"] >= 1
        assert health["last_tick"] is not None

        backend.stop()

    def test_double_start_ignored(self):
        backend = ThreadSchedulerBackend()
        backend.start(lambda: None, interval_seconds=1.0)
        backend.start(lambda: None, interval_seconds=1.0)

        assert backend.is_running
        backend.stop()

    def test_stop_without_start(self):
        ThreadSchedulerBackend().stop()

    def test_tick_callback_exception_handled(self):
        """Exceptions in the tick callback don't crash the loop."""
        backend = ThreadSchedulerBackend()
        error_count = 0

        def failing_tick():
            nonlocal error_count
            error_count += 1
            raise ValueError("Test error")

        backend.start(failing_tick, interval_seconds=0.05)
        time.sleep(0.3)
        backend.stop()

        assert error_count >= 2

    def test_last_tick_property(self):
        backend = ThreadSchedulerBackend()
        assert backend.last_tick is None

        backend.start(lambda: None, interval_seconds=0.05)
        time.sleep(0.2)
        backend.stop()

        assert isinstance(backend.last_tick, datetime)
        assert backend.tick_count >= 1
