import threading
import time

import pytest

from thronion.engine import ClassificationEngine
from thronion.quantum import StaticCoherenceOracle
from thronion.runtime import MaintenanceScheduler, PeriodicTask


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_periodic_task_runs_until_stopped():
    ticks = []
    task = PeriodicTask("ticker", 0.01, lambda: ticks.append(1))
    task.start()

    assert _wait_for(lambda: len(ticks) >= 3)
    task.stop_event.set()
    task.join(1.0)

    assert not task.running
    settled = len(ticks)
    time.sleep(0.05)
    assert len(ticks) == settled


def test_failures_are_recorded_and_the_loop_continues():
    def explode() -> None:
        raise RuntimeError("boom")

    task = PeriodicTask("failing", 0.01, explode)
    task.start()
    try:
        assert _wait_for(lambda: task.failures >= 2)
    finally:
        task.stop_event.set()
        task.join(1.0)

    assert isinstance(task.last_error, RuntimeError)
    assert task.iterations >= task.failures


def test_task_cannot_start_twice():
    release = threading.Event()
    task = PeriodicTask("blocking", 0.01, release.wait)
    task.start()
    try:
        with pytest.raises(RuntimeError):
            task.start()
    finally:
        task.stop_event.set()
        release.set()
        task.join(1.0)


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        PeriodicTask("bad", 0.0, lambda: None)


def test_scheduler_drives_engine_maintenance():
    engine = ClassificationEngine(oracle=StaticCoherenceOracle(0.5))
    initial = engine.threshold.value()

    with MaintenanceScheduler(engine, threshold_interval=0.01, optimizer_interval=0.01) as scheduler:
        assert scheduler.running
        assert _wait_for(lambda: engine.threshold.value() < initial)
        assert _wait_for(lambda: engine.optimizer.runs >= 1)

    assert not scheduler.running
    assert all(task.last_error is None for task in scheduler.tasks)
