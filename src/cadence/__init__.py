"""
cadence — recurring workers with delay-gated, single-flight execution.

Quick start::

    from datetime import timedelta
    from cadence import WorkerRuntime

    class Reindexer:
        identity = "Reindexer"
        delay = timedelta(minutes=15)

        def run_work(self) -> None:
            rebuild_search_index()

    runtime = WorkerRuntime(Reindexer())
    runtime.run_async()      # admitted: never run before
    runtime.run_async()      # skipped: busy, or not yet due
"""

from cadence.config import ConfigurationStore, WorkerConfiguration
from cadence.core.errors import (
    CadenceError,
    ConfigurationNotReadyError,
    SerializationError,
    StorageError,
    WorkExecutionError,
)
from cadence.core.settings import CadenceSettings, get_settings
from cadence.scheduling import WorkerScheduler
from cadence.worker import (
    RunDecision,
    RunRejection,
    RunState,
    Worker,
    WorkerCapability,
    WorkerRuntime,
)

__version__ = "0.1.0"

__all__ = [
    "CadenceError",
    "CadenceSettings",
    "ConfigurationNotReadyError",
    "ConfigurationStore",
    "RunDecision",
    "RunRejection",
    "RunState",
    "SerializationError",
    "StorageError",
    "WorkExecutionError",
    "Worker",
    "WorkerCapability",
    "WorkerConfiguration",
    "WorkerRuntime",
    "WorkerScheduler",
    "get_settings",
]
