"""
Shared pytest fixtures for cadence tests.

This module provides:
- A controllable clock for deterministic eligibility tests
- Settings and store fixtures rooted in a temporary directory
- Sample workers that record calls and can be held in flight
"""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
import structlog

from cadence.config.store import ConfigurationStore
from cadence.core.settings import CadenceSettings, clear_settings_cache


# Directories whose tests drive several layers together (CLI → runtime → store).
INTEGRATION_DIRS = {"cli"}


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests as unit or integration based on their location."""
    tests_root = Path(__file__).parent
    for item in items:
        test_path = item.path.relative_to(tests_root)
        if INTEGRATION_DIRS.intersection(test_path.parts):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Clock
# =============================================================================


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# =============================================================================
# Sample workers
# =============================================================================


class RecordingWorker:
    """Counts calls; optionally raises from the work body."""

    def __init__(
        self,
        identity: str = "Recorder",
        delay: timedelta = timedelta(seconds=60),
        error: Exception | None = None,
    ) -> None:
        self.identity = identity
        self.delay = delay
        self.error = error
        self.calls: list[tuple[Any, ...]] = []

    def run_work(self, *args: Any) -> None:
        self.calls.append(args)
        if self.error is not None:
            raise self.error


class GatedWorker:
    """Blocks inside the work body until ``release`` is set.

    Tracks the maximum number of overlapping work-body invocations.
    """

    def __init__(self, identity: str = "Gated", delay: timedelta = timedelta(seconds=60)) -> None:
        self.identity = identity
        self.delay = delay
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def run_work(self, *args: Any) -> None:
        with self._lock:
            self.calls += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        self.started.set()
        try:
            self.release.wait(timeout=5.0)
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def recording_worker() -> RecordingWorker:
    return RecordingWorker()


@pytest.fixture
def gated_worker() -> GatedWorker:
    worker = GatedWorker()
    yield worker
    worker.release.set()


# =============================================================================
# Settings / store
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Keep cached settings and structlog configuration from leaking between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()
    structlog.reset_defaults()


@pytest.fixture
def settings(tmp_path: Path) -> CadenceSettings:
    return CadenceSettings(root_dir=tmp_path)


@pytest.fixture
def store(tmp_path: Path) -> ConfigurationStore:
    return ConfigurationStore(tmp_path)
