"""WorkerScheduler — the controller that issues run requests to registered workers.

Each tick asks every registered runtime to ``run_async()``. Eligibility and
single-flight are the runtime's business; the scheduler only decides *when*
to ask. Admitted runs execute on the runtime's own background thread, so a
slow worker never delays the tick for the others.
"""

from __future__ import annotations

import threading
from typing import Any

from cadence.core.errors import ConfigError
from cadence.core.logging import get_logger
from cadence.scheduling.thread_backend import ThreadSchedulerBackend
from cadence.worker.base import Worker
from cadence.worker.runtime import WorkerRuntime

logger = get_logger(__name__)


class WorkerScheduler:
    """Periodically requests async runs from a set of worker runtimes."""

    def __init__(self, backend: ThreadSchedulerBackend | None = None) -> None:
        self._backend = backend or ThreadSchedulerBackend()
        self._runtimes: dict[str, WorkerRuntime] = {}
        self._lock = threading.Lock()

    def register(self, worker: WorkerRuntime | Worker) -> WorkerRuntime:
        """Add a runtime (or a :class:`Worker`'s runtime). Identities must be unique."""
        runtime = worker.runtime if isinstance(worker, Worker) else worker
        with self._lock:
            if runtime.identity in self._runtimes:
                raise ConfigError(
                    f"Worker already registered: {runtime.identity}"
                ).with_context(worker=runtime.identity)
            self._runtimes[runtime.identity] = runtime
        logger.info("worker_registered", worker=runtime.identity, delay_seconds=runtime.delay.total_seconds())
        return runtime

    def unregister(self, identity: str) -> WorkerRuntime | None:
        with self._lock:
            return self._runtimes.pop(identity, None)

    @property
    def runtimes(self) -> list[WorkerRuntime]:
        with self._lock:
            return list(self._runtimes.values())

    def tick(self) -> list[str]:
        """Request one async run from every runtime; return identities admitted."""
        admitted = []
        for runtime in self.runtimes:
            if runtime.run_async():
                admitted.append(runtime.identity)
        return admitted

    def start(self, interval_seconds: float = 10.0) -> None:
        self._backend.start(self.tick, interval_seconds=interval_seconds)

    def stop(self, wait: bool = True) -> None:
        """Stop ticking, then shut down every runtime's background thread."""
        self._backend.stop()
        for runtime in self.runtimes:
            runtime.shutdown(wait=wait)

    @property
    def is_running(self) -> bool:
        return self._backend.is_running

    def health(self) -> dict[str, Any]:
        return {
            **self._backend.health(),
            "workers": [runtime.health() for runtime in self.runtimes],
        }
