"""Tests for WorkerRuntime eligibility and last-run bookkeeping.

All tests drive a FakeClock so the delay window is exact.
"""

from __future__ import annotations

from datetime import UTC, timedelta

import pytest

from cadence.worker import RunRejection, RunState, WorkerRuntime

from conftest import RecordingWorker


@pytest.fixture
def runtime(recording_worker, clock):
    rt = WorkerRuntime(recording_worker, clock=clock)
    yield rt
    rt.shutdown()


class TestConstruction:
    def test_initial_state(self, runtime):
        assert runtime.state is RunState.IDLE
        assert runtime.is_busy is False
        assert runtime.last_run is None
        assert runtime.next_due_at is None
        assert runtime.identity == "Recorder"
        assert runtime.delay == timedelta(seconds=60)

    def test_rejects_object_without_capability(self):
        with pytest.raises(TypeError):
            WorkerRuntime(object())

    def test_rejects_non_timedelta_delay(self):
        with pytest.raises(TypeError):
            WorkerRuntime(RecordingWorker(delay=60))

    def test_rejects_negative_delay(self):
        with pytest.raises(ValueError):
            WorkerRuntime(RecordingWorker(delay=timedelta(seconds=-1)))

    def test_initial_last_run(self, recording_worker, clock):
        rt = WorkerRuntime(recording_worker, clock=clock, last_run=clock.now)
        assert rt.last_run == clock.now
        assert rt.next_due_at == clock.now + timedelta(seconds=60)

    def test_naive_last_run_taken_as_utc(self, recording_worker, clock):
        naive = clock.now.replace(tzinfo=None) - timedelta(hours=1)
        rt = WorkerRuntime(recording_worker, clock=clock, last_run=naive)

        assert rt.last_run == naive.replace(tzinfo=UTC)
        assert rt.is_eligible()
        assert rt.run_sync().admitted

    def test_naive_last_run_still_gated(self, recording_worker, clock):
        naive = clock.now.replace(tzinfo=None) - timedelta(seconds=10)
        rt = WorkerRuntime(recording_worker, clock=clock, last_run=naive)

        decision = rt.run_async()
        assert decision.reason is RunRejection.NOT_DUE


class TestEligibilityFormula:
    def test_never_run_is_eligible_regardless_of_delay(self, clock):
        rt = WorkerRuntime(RecordingWorker(delay=timedelta(days=365)), clock=clock)
        assert rt.is_eligible()
        assert rt.run_sync().admitted

    @pytest.mark.parametrize(
        "elapsed, expected",
        [
            (0, False),
            (30, False),
            (59.999, False),
            (60, True),
            (61, True),
            (3600, True),
        ],
    )
    def test_elapsed_against_delay(self, runtime, clock, elapsed, expected):
        runtime.run_sync()
        clock.advance(seconds=elapsed)
        assert runtime.is_eligible() is expected
        assert runtime.run_sync().admitted is expected

    def test_force_overrides_delay(self, runtime, clock, recording_worker):
        runtime.run_sync()
        clock.advance(seconds=1)
        assert runtime.is_eligible(force=True)
        assert runtime.run_sync(force=True).admitted
        assert len(recording_worker.calls) == 2

    def test_is_eligible_with_explicit_now(self, runtime, clock):
        runtime.run_sync()
        assert runtime.is_eligible(now=clock.now + timedelta(minutes=2))
        assert not runtime.is_eligible(now=clock.now + timedelta(seconds=2))

    def test_zero_delay_always_due(self, clock):
        rt = WorkerRuntime(RecordingWorker(delay=timedelta(0)), clock=clock)
        assert rt.run_sync().admitted
        assert rt.run_sync().admitted


class TestLastRun:
    def test_rejected_run_is_a_noop(self, runtime, clock, recording_worker):
        runtime.run_sync()
        first = runtime.last_run
        clock.advance(seconds=10)

        decision = runtime.run_sync()

        assert not decision
        assert decision.reason is RunRejection.NOT_DUE
        assert runtime.last_run == first
        assert len(recording_worker.calls) == 1

    def test_last_run_is_admission_time(self, clock):
        class SlowWorker(RecordingWorker):
            def run_work(self, *args):
                clock.advance(seconds=30)
                super().run_work(*args)

        rt = WorkerRuntime(SlowWorker(), clock=clock)
        admitted_at = clock.now
        rt.run_sync()
        assert rt.last_run == admitted_at
        assert rt.next_due_at == admitted_at + timedelta(seconds=60)

    def test_args_are_passed_through(self, runtime, recording_worker):
        runtime.run_sync("a", "b")
        assert recording_worker.calls == [("a", "b")]


class TestScenario:
    def test_sixty_second_delay_scenario(self, gated_worker, clock):
        """Admit, reject while busy, reject before due, admit after delay."""
        rt = WorkerRuntime(gated_worker, clock=clock)
        t0 = clock.now

        first = rt.run_async()
        assert first.admitted
        assert rt.last_run == t0
        assert gated_worker.started.wait(timeout=5.0)

        busy = rt.run_async()
        assert not busy.admitted
        assert busy.reason is RunRejection.BUSY

        gated_worker.release.set()
        first.future.result(timeout=5.0)
        assert rt.is_busy is False

        clock.advance(seconds=10)
        not_due = rt.run_async()
        assert not not_due.admitted
        assert not_due.reason is RunRejection.NOT_DUE

        clock.advance(seconds=51)
        again = rt.run_async()
        assert again.admitted
        again.future.result(timeout=5.0)
        assert rt.last_run == t0 + timedelta(seconds=61)
        assert gated_worker.calls == 2
        rt.shutdown()
