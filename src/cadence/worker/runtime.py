"""
Worker runtime — delay-gated, single-flight execution of a work body.

┌──────────────────────────────────────────────────────────────────────────────┐
│  WORKER RUNTIME                                                               │
│                                                                               │
│   run_sync(force) ─┐                                                          │
│   run_async(force) ┼──► _admit()  ── under lock ──────────────────────┐       │
│   run()  ──────────┘      │                                           │       │
│                           │  busy?            → RunRejection.BUSY     │       │
│                           │  not due/forced?  → RunRejection.NOT_DUE  │       │
│                           │  else: is_busy = True, last_run = now     │       │
│                           ▼                                           │       │
│                     _execute(args)   (inline, or on the pool thread)  │       │
│                           │                                           │       │
│                           │  update_last_run()  (optional hook)       │       │
│                           │  worker.run_work(*args)                   │       │
│                           │  except → log + WorkExecutionError        │       │
│                           │  finally → is_busy = False                │       │
│                           ▼                                           │       │
│                         IDLE  ◄───────────────────────────────────────┘       │
│                                                                               │
│  Eligibility: last_run is None  OR  now - last_run >= delay  OR  force       │
│  Admission is atomic: the busy check, the due check, the last_run update     │
│  and the busy flag are all applied while holding one lock, so at most one   │
│  run is in flight per runtime regardless of which entry point is used.      │
└──────────────────────────────────────────────────────────────────────────────┘

Usage::

    runtime = WorkerRuntime(Reindexer())
    decision = runtime.run_async()
    if decision.future is not None:
        decision.future.exception()  # wait; WorkExecutionError on failure
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from datetime import datetime, timedelta
from typing import Any

from cadence.config.store import validate_identity
from cadence.core.errors import WorkExecutionError
from cadence.core.logging import LogContext, get_logger
from cadence.core.timestamps import ensure_utc, to_iso8601, utc_now
from cadence.worker.protocol import LastRunRecorder, WorkerCapability
from cadence.worker.state import RunDecision, RunRejection, RunState, WorkerHealth, WorkerState

logger = get_logger(__name__)

Clock = Callable[[], datetime]


class WorkerRuntime:
    """Gates, serializes, and executes the work body of one worker.

    Thread-safety:
        Admission and completion bookkeeping are guarded by a per-runtime
        lock. The work body itself runs outside the lock, either on the
        caller's thread (:meth:`run_sync`) or on a single background thread
        owned by the runtime (:meth:`run_async`, :meth:`run`).
    """

    def __init__(
        self,
        worker: WorkerCapability,
        *,
        clock: Clock = utc_now,
        last_run: datetime | None = None,
        executor: ThreadPoolExecutor | None = None,
    ):
        """
        Args:
            worker: Any object satisfying :class:`WorkerCapability`.
            clock: Returns the current time. Injected for tests.
            last_run: Initial last-run time, e.g. one the worker persisted
                itself. Naive values are taken as UTC. ``None`` means never
                run, so the first request is always eligible.
            executor: Background executor for async runs. If ``None``, a
                one-thread pool is created on first use and owned by the
                runtime.
        """
        if not isinstance(worker, WorkerCapability):
            raise TypeError(
                f"{type(worker).__name__} does not provide identity, delay and run_work()"
            )

        delay = worker.delay
        if not isinstance(delay, timedelta):
            raise TypeError(f"delay must be a timedelta, got {type(delay).__name__}")
        if delay < timedelta(0):
            raise ValueError(f"delay must not be negative, got {delay}")

        self._worker = worker
        self._identity = validate_identity(worker.identity)
        self._delay = delay
        self._clock = clock
        self._state = WorkerState(last_run=ensure_utc(last_run))
        self._lock = threading.Lock()

        self._executor = executor
        self._owns_executor = executor is None
        self._future: Future[None] | None = None
        self._log = logger.bind(worker=self._identity)

    # ── Read-only state ──────────────────────────────────────────

    @property
    def worker(self) -> WorkerCapability:
        return self._worker

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def delay(self) -> timedelta:
        return self._delay

    @property
    def is_busy(self) -> bool:
        with self._lock:
            return self._state.is_busy

    @property
    def last_run(self) -> datetime | None:
        with self._lock:
            return self._state.last_run

    @property
    def state(self) -> RunState:
        with self._lock:
            return self._state.run_state

    @property
    def next_due_at(self) -> datetime | None:
        """Earliest time an unforced run is admitted, or ``None`` if never run."""
        with self._lock:
            last_run = self._state.last_run
        return None if last_run is None else last_run + self._delay

    def is_eligible(self, force: bool = False, now: datetime | None = None) -> bool:
        """Whether the delay window allows a run at *now* (busy state not considered)."""
        with self._lock:
            last_run = self._state.last_run
        return self._is_due(last_run, now or self._clock(), force)

    def _is_due(self, last_run: datetime | None, now: datetime, force: bool) -> bool:
        return force or last_run is None or now - last_run >= self._delay

    # ── Entry points ─────────────────────────────────────────────

    def run_sync(self, *args: Any, force: bool = False) -> RunDecision:
        """Run the work body inline if the worker is idle and due.

        Blocks for the full duration of the work body.

        Raises:
            WorkExecutionError: the work body raised; ``cause`` is the original.
        """
        with self._lock:
            rejection = self._admit(mode="sync", force=force, check_due=True)
        if rejection is not None:
            return self._skip(rejection, mode="sync", force=force)

        self._execute(args)
        return RunDecision(admitted=True)

    def run_async(self, *args: Any, force: bool = False) -> RunDecision:
        """Start the work body in the background if the worker is idle and due.

        Returns immediately. The decision carries the ``Future`` of the run;
        failures are logged and stored on it, never raised here.
        """
        return self._run_background(args, mode="async", force=force, check_due=True)

    def run(self, *args: Any) -> RunDecision:
        """Start the work body in the background, ignoring the delay window.

        Still refuses to start while a run is in flight.
        """
        return self._run_background(args, mode="manual", force=True, check_due=False)

    def update_last_run(self) -> None:
        """Hand the in-memory last-run time to the worker's persistence hook, if any."""
        if not isinstance(self._worker, LastRunRecorder):
            return
        last_run = self.last_run
        if last_run is not None:
            self._worker.update_last_run(last_run)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the current background run finishes.

        Returns ``False`` if *timeout* elapsed first. A failed run counts as
        finished; its error is on the future returned by :meth:`run_async`.
        """
        with self._lock:
            future = self._future
        if future is None:
            return True
        done, _ = wait_futures([future], timeout=timeout)
        return future in done

    # ── Admission / execution ────────────────────────────────────

    def _admit(self, *, mode: str, force: bool, check_due: bool) -> RunRejection | None:
        """Apply the busy and due checks. Caller holds ``self._lock``."""
        now = self._clock()
        if self._state.is_busy:
            rejection = RunRejection.BUSY
        elif check_due and not self._is_due(self._state.last_run, now, force):
            rejection = RunRejection.NOT_DUE
        else:
            self._state.is_busy = True
            self._state.last_run = now
            self._state.runs_started += 1
            self._log.info("worker_run_admitted", mode=mode, force=force)
            return None

        self._state.runs_skipped += 1
        return rejection

    def _skip(self, rejection: RunRejection, *, mode: str, force: bool) -> RunDecision:
        self._log.debug(
            "worker_run_skipped",
            mode=mode,
            force=force,
            reason=rejection.value,
            next_due_at=to_iso8601(self.next_due_at),
        )
        return RunDecision.rejected(rejection)

    def _run_background(
        self, args: tuple[Any, ...], *, mode: str, force: bool, check_due: bool
    ) -> RunDecision:
        # Admission and submission share one critical section, so wait()
        # never sees an admitted run without its future.
        with self._lock:
            rejection = self._admit(mode=mode, force=force, check_due=check_due)
            if rejection is None:
                if self._executor is None:
                    self._executor = ThreadPoolExecutor(
                        max_workers=1, thread_name_prefix=f"cadence-{self._identity}"
                    )
                try:
                    self._future = self._executor.submit(self._execute, args)
                except RuntimeError:
                    # Executor already shut down: the admitted run never starts.
                    self._state.is_busy = False
                    raise
                return RunDecision(admitted=True, future=self._future)

        return self._skip(rejection, mode=mode, force=force)

    def _execute(self, args: tuple[Any, ...]) -> None:
        started = time.monotonic()
        try:
            self.update_last_run()
            # Events the work body logs itself carry the worker identity too.
            with LogContext(worker=self._identity):
                self._worker.run_work(*args)
        except Exception as e:
            self._log.exception("worker_run_failed", error=str(e))
            with self._lock:
                self._state.runs_failed += 1
                self._state.last_error = str(e)
            raise WorkExecutionError(
                f"Worker {self._identity} failed: {e}", cause=e
            ).with_context(worker=self._identity) from e
        else:
            with self._lock:
                self._state.runs_succeeded += 1
            self._log.info(
                "worker_run_completed",
                duration_ms=round((time.monotonic() - started) * 1000, 2),
            )
        finally:
            with self._lock:
                self._state.is_busy = False

    # ── Health / lifecycle ───────────────────────────────────────

    def get_health(self) -> WorkerHealth:
        """Return structured health status."""
        with self._lock:
            state = self._state
            last_run = state.last_run
            return WorkerHealth(
                worker=self._identity,
                state=state.run_state,
                delay=self._delay,
                last_run=last_run,
                next_due_at=None if last_run is None else last_run + self._delay,
                runs_started=state.runs_started,
                runs_succeeded=state.runs_succeeded,
                runs_failed=state.runs_failed,
                runs_skipped=state.runs_skipped,
                last_error=state.last_error,
            )

    def health(self) -> dict[str, Any]:
        return self.get_health().to_dict()

    def shutdown(self, wait: bool = True) -> None:
        """Release the background thread. Waits for an in-flight run by default."""
        with self._lock:
            executor = self._executor if self._owns_executor else None
            if executor is not None:
                self._executor = None
        if executor is not None:
            executor.shutdown(wait=wait)

    def __enter__(self) -> WorkerRuntime:
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown(wait=True)

    def __repr__(self) -> str:
        return f"WorkerRuntime(worker={self._identity!r}, delay={self._delay}, state={self.state.value})"
