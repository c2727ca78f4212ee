"""Convenience base class wiring a work body to a runtime and a configuration store.

Subclassing is optional; :class:`~cadence.worker.runtime.WorkerRuntime`
accepts any object with ``identity``, ``delay`` and ``run_work``. This base
adds per-worker configuration access on top of that::

    class Mailer(Worker):
        identity = "Mailer"
        delay = timedelta(minutes=5)

        def run_work(self, *args: str) -> None:
            config = self.get_configuration(MailerConfiguration)
            send_pending(config.smtp_host)

        def update_last_run(self, last_run: datetime) -> None:
            pass

    mailer = Mailer(settings=get_settings(root_dir=Path("/srv/app")))
    mailer.run_async()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, ClassVar, TypeVar

from cadence.config.models import WorkerConfiguration
from cadence.config.store import ConfigurationStore
from cadence.core.settings import CadenceSettings, get_settings
from cadence.core.timestamps import utc_now
from cadence.worker.runtime import Clock, WorkerRuntime
from cadence.worker.state import RunDecision

T = TypeVar("T", bound=WorkerConfiguration)


class Worker(ABC):
    """Base class for a recurring worker.

    Subclasses set ``identity`` and ``delay`` as class attributes (or
    properties) and implement :meth:`run_work` and :meth:`update_last_run`.
    """

    identity: ClassVar[str]
    delay: ClassVar[timedelta]

    def __init__(
        self,
        *,
        settings: CadenceSettings | None = None,
        store: ConfigurationStore | None = None,
        clock: Clock = utc_now,
        last_run: datetime | None = None,
    ):
        settings = settings or get_settings()
        self._store = store or ConfigurationStore.from_settings(settings)
        self._runtime = WorkerRuntime(self, clock=clock, last_run=last_run)

    @abstractmethod
    def run_work(self, *args: Any) -> None:
        """The logic this worker executes on each admitted run."""

    @abstractmethod
    def update_last_run(self, last_run: datetime) -> None:
        """Persist the admission time wherever this worker keeps it.

        Called before every run. Implement as a no-op if nothing needs to
        be stored; the runtime tracks last-run in memory either way.
        """

    # ── Runtime delegation ───────────────────────────────────────

    @property
    def runtime(self) -> WorkerRuntime:
        return self._runtime

    @property
    def is_busy(self) -> bool:
        return self._runtime.is_busy

    @property
    def last_run(self) -> datetime | None:
        return self._runtime.last_run

    def run_sync(self, *args: Any, force: bool = False) -> RunDecision:
        return self._runtime.run_sync(*args, force=force)

    def run_async(self, *args: Any, force: bool = False) -> RunDecision:
        return self._runtime.run_async(*args, force=force)

    def run(self, *args: Any) -> RunDecision:
        return self._runtime.run(*args)

    def wait(self, timeout: float | None = None) -> bool:
        return self._runtime.wait(timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._runtime.shutdown(wait=wait)

    # ── Configuration ────────────────────────────────────────────

    @property
    def store(self) -> ConfigurationStore:
        return self._store

    @property
    def config_path(self) -> Path:
        return self._store.path_for(self.identity)

    def get_configuration(self, model: type[T]) -> T:
        """Load this worker's configuration; fails until it is marked ``Configured``."""
        return self._store.load(self.identity, model)

    def save_configuration(self, configuration: WorkerConfiguration) -> Path:
        """Overwrite this worker's configuration file with *configuration*."""
        return self._store.save(self.identity, configuration)
