"""Controller loop that drives worker runtimes on a fixed tick."""

from cadence.scheduling.service import WorkerScheduler
from cadence.scheduling.thread_backend import ThreadSchedulerBackend

__all__ = [
    "ThreadSchedulerBackend",
    "WorkerScheduler",
]
