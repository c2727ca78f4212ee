"""Threading-based tick loop.

┌──────────────────────────────────────────────────────────────────────────────┐
│  THREAD BACKEND                                                               │
│                                                                               │
│   start(tick, interval)                                                       │
│      │                                                                        │
│      ▼                                                                        │
│   Daemon Thread (loop)                                                        │
│      while not stop_event.wait(interval):                                     │
│          tick_count += 1                                                      │
│          last_tick = now()                                                    │
│          tick()          ◄── exceptions are logged, loop continues            │
│                                                                               │
│   stop()                                                                      │
│      stop_event.set()                                                         │
│      thread.join(timeout=5.0)                                                 │
│                                                                               │
│  The tick is a plain callable: WorkerScheduler.tick only issues run          │
│  requests, and each admitted run executes on its runtime's own thread.       │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any

from cadence.core.logging import get_logger
from cadence.core.timestamps import to_iso8601, utc_now

logger = get_logger(__name__)

TickCallback = Callable[[], Any]


class ThreadSchedulerBackend:
    """Calls a tick callback on a daemon thread at a fixed interval.

    Example:
        >>> backend = ThreadSchedulerBackend()
        >>> backend.start(lambda: print("Tick!"), interval_seconds=5.0)
        >>> # ... later ...
        >>> backend.stop()
    """

    name = "thread"

    def __init__(self) -> None:
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._tick_count = 0
        self._last_tick: datetime | None = None
        self._interval: float = 10.0
        self._started = False
        self._lock = threading.Lock()

    def start(
        self,
        tick_callback: TickCallback,
        interval_seconds: float = 10.0,
    ) -> None:
        """Start the tick loop in a daemon thread.

        Args:
            tick_callback: Callable invoked on each tick.
            interval_seconds: How often to tick (default: 10s).
        """
        if self._started:
            logger.warning("scheduler_already_started", backend=self.name)
            return

        self._interval = interval_seconds
        self._stop_event.clear()

        def _loop() -> None:
            logger.info("scheduler_started", backend=self.name, interval_seconds=interval_seconds)
            while not self._stop_event.wait(interval_seconds):
                with self._lock:
                    self._tick_count += 1
                    self._last_tick = utc_now()

                try:
                    tick_callback()
                except Exception as e:
                    logger.exception("scheduler_tick_failed", error=str(e))

            logger.info("scheduler_stopped", backend=self.name)

        self._thread = threading.Thread(target=_loop, daemon=True, name="cadence-scheduler")
        self._thread.start()
        self._started = True

    def stop(self) -> None:
        """Stop the loop. Waits up to 5 seconds for the current tick to complete."""
        if not self._started:
            return

        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5.0)
            if self._thread.is_alive():
                logger.warning("scheduler_thread_still_alive", backend=self.name)

        self._started = False

    def health(self) -> dict[str, Any]:
        return {
            "healthy": self.is_running,
            "backend": self.name,
            "tick_count": self._tick_count,
            "last_tick": to_iso8601(self._last_tick),
            "interval_seconds": self._interval,
        }

    @property
    def is_running(self) -> bool:
        return self._started and self._thread is not None and self._thread.is_alive()

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def last_tick(self) -> datetime | None:
        return self._last_tick
