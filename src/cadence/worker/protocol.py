"""Worker capability protocol.

Anything that exposes an ``identity``, a ``delay`` and a ``run_work``
callable can be driven by :class:`~cadence.worker.runtime.WorkerRuntime`.
No base class is required.

Example (plain class)::

    class Reindexer:
        identity = "Reindexer"
        delay = timedelta(minutes=15)

        def run_work(self, *args: str) -> None:
            rebuild_search_index()

        def update_last_run(self, last_run: datetime) -> None:
            # Optional: persist the admission time somewhere durable.
            ...

    runtime = WorkerRuntime(Reindexer())
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class WorkerCapability(Protocol):
    """Protocol for pluggable work bodies.

    The runtime owns scheduling state; implementations must not try to
    mutate busy or last-run state themselves.
    """

    identity: str
    delay: timedelta

    def run_work(self, *args: Any) -> None:
        """Execute one unit of work. Raise to signal failure."""
        ...


@runtime_checkable
class LastRunRecorder(Protocol):
    """Optional hook for workers that persist their last-run time."""

    def update_last_run(self, last_run: datetime) -> None:
        ...
