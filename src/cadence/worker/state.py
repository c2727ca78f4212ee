"""Per-worker runtime state and run-request outcomes."""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from cadence.core.timestamps import to_iso8601


class RunState(str, Enum):
    """Lifecycle of a worker instance. ``IDLE`` is initial; there is no terminal state."""

    IDLE = "idle"
    RUNNING = "running"


class RunRejection(str, Enum):
    """Why a run request was not admitted."""

    BUSY = "busy"
    NOT_DUE = "not_due"


@dataclass(frozen=True)
class RunDecision:
    """Outcome of a run request.

    ``future`` is set only for admitted background runs; it resolves when the
    work body finishes and carries a ``WorkExecutionError`` if it failed.
    """

    admitted: bool
    reason: RunRejection | None = None
    future: Future[None] | None = field(default=None, compare=False)

    def __bool__(self) -> bool:
        return self.admitted

    @classmethod
    def rejected(cls, reason: RunRejection) -> RunDecision:
        return cls(admitted=False, reason=reason)


@dataclass
class WorkerState:
    """Mutable state owned by a single runtime.

    ``last_run`` is the admission time of the most recent run, not its
    completion time. ``None`` means the worker has never run in this process.
    """

    is_busy: bool = False
    last_run: datetime | None = None
    runs_started: int = 0
    runs_succeeded: int = 0
    runs_failed: int = 0
    runs_skipped: int = 0
    last_error: str | None = None

    @property
    def run_state(self) -> RunState:
        return RunState.RUNNING if self.is_busy else RunState.IDLE


@dataclass
class WorkerHealth:
    """Structured health snapshot of a worker runtime."""

    worker: str
    state: RunState
    delay: timedelta
    last_run: datetime | None = None
    next_due_at: datetime | None = None
    runs_started: int = 0
    runs_succeeded: int = 0
    runs_failed: int = 0
    runs_skipped: int = 0
    last_error: str | None = None

    @property
    def is_busy(self) -> bool:
        return self.state is RunState.RUNNING

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "worker": self.worker,
            "state": self.state.value,
            "busy": self.is_busy,
            "delay_seconds": self.delay.total_seconds(),
            "last_run": to_iso8601(self.last_run),
            "next_due_at": to_iso8601(self.next_due_at),
            "runs_started": self.runs_started,
            "runs_succeeded": self.runs_succeeded,
            "runs_failed": self.runs_failed,
            "runs_skipped": self.runs_skipped,
            "last_error": self.last_error,
        }
