"""Background threads driving the engine's maintenance hooks."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional

from thronion.engine import ClassificationEngine

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Run ``action`` every ``interval`` seconds on a daemon thread.

    The loop checks ``stop_event`` only between iterations, so an action in
    progress always completes. Exceptions raised by the action are logged
    with their traceback, kept in :attr:`last_error`, and the loop carries on.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        action: Callable[[], Any],
        *,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.name = name
        self.interval = float(interval)
        self.action = action
        self.stop_event = stop_event or threading.Event()
        self.iterations = 0
        self.failures = 0
        self.last_error: Optional[BaseException] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            raise RuntimeError(f"task {self.name!r} is already running")
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def run_once(self) -> None:
        try:
            self.action()
        except Exception as exc:
            self.failures += 1
            self.last_error = exc
            logger.exception("background task %s failed", self.name)
        finally:
            self.iterations += 1

    def _run(self) -> None:
        while not self.stop_event.wait(self.interval):
            self.run_once()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)


class MaintenanceScheduler:
    """Threshold and optimizer cadences for a :class:`ClassificationEngine`.

    Usage::

        with MaintenanceScheduler(engine, threshold_interval=1.0, optimizer_interval=10.0):
            serve()
    """

    def __init__(
        self,
        engine: ClassificationEngine,
        *,
        threshold_interval: float = 1.0,
        optimizer_interval: float = 10.0,
        decay: bool = True,
    ) -> None:
        self.engine = engine
        self.decay = decay
        self._stop = threading.Event()
        self.tasks: List[PeriodicTask] = [
            PeriodicTask(
                "thronion-threshold",
                threshold_interval,
                self.engine.update_threshold,
                stop_event=self._stop,
            ),
            PeriodicTask(
                "thronion-optimizer",
                optimizer_interval,
                self._optimizer_step,
                stop_event=self._stop,
            ),
        ]

    def _optimizer_step(self) -> None:
        if self.decay:
            factor = 1.0 - self.engine.config.decay_rate_beta
            self.engine.store.apply_decay(factor)
            floor = self.engine.config.prune_strength_floor
            if floor > 0.0:
                self.engine.store.prune_stale(floor)
        self.engine.reseed_oracle()
        self.engine.optimize()

    @property
    def running(self) -> bool:
        return any(task.running for task in self.tasks)

    def start(self) -> None:
        if self.running:
            raise RuntimeError("scheduler is already running")
        self._stop.clear()
        for task in self.tasks:
            task.start()
        logger.info(
            "maintenance scheduler started (%s)",
            ", ".join(f"{task.name}={task.interval:g}s" for task in self.tasks),
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        for task in self.tasks:
            task.join(timeout)
        logger.info("maintenance scheduler stopped")

    def __enter__(self) -> "MaintenanceScheduler":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


__all__ = ["MaintenanceScheduler", "PeriodicTask"]
