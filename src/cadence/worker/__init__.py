"""Worker capability, runtime, and base class."""

from cadence.worker.base import Worker
from cadence.worker.protocol import LastRunRecorder, WorkerCapability
from cadence.worker.runtime import WorkerRuntime
from cadence.worker.state import RunDecision, RunRejection, RunState, WorkerHealth, WorkerState

__all__ = [
    "LastRunRecorder",
    "RunDecision",
    "RunRejection",
    "RunState",
    "Worker",
    "WorkerCapability",
    "WorkerHealth",
    "WorkerRuntime",
    "WorkerState",
]
