"""Coherence-driven region consolidation."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict

from thronion.classifier.store import RegionStore
from thronion.quantum.coherence import CoherenceOracle

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 10


@dataclass(frozen=True)
class OptimizationReport:
    """Outcome of one :meth:`Optimizer.run` call.

    ``triggered`` is False when the oracle already reported an instability at
    or below the threshold; nothing else happened in that case.
    """

    triggered: bool
    merged: int
    iterations: int
    converged: bool
    instability_before: float
    instability_after: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "triggered": self.triggered,
            "merged": self.merged,
            "iterations": self.iterations,
            "converged": self.converged,
            "instability_before": float(self.instability_before),
            "instability_after": float(self.instability_after),
        }


class Optimizer:
    """Merge coherent regions and settle the oracle when it reports instability.

    The settling loop evolves the oracle by ``dt`` and stops as soon as the
    instability drops below ``stability_epsilon`` or after
    ``max_iterations`` steps. Running out of iterations is logged and
    counted, never raised.
    """

    def __init__(
        self,
        store: RegionStore,
        oracle: CoherenceOracle,
        *,
        instability_threshold: float = 0.1,
        stability_epsilon: float = 0.05,
        merge_fidelity_threshold: float = 0.9,
        max_iterations: int = MAX_ITERATIONS,
        dt: float = 0.01,
    ) -> None:
        if instability_threshold < 0:
            raise ValueError("instability_threshold must be non-negative")
        if stability_epsilon <= 0:
            raise ValueError("stability_epsilon must be positive")
        if not 0.0 <= merge_fidelity_threshold <= 1.0:
            raise ValueError("merge_fidelity_threshold must be in range [0, 1]")
        if not 1 <= max_iterations <= MAX_ITERATIONS:
            raise ValueError(f"max_iterations must be in range [1, {MAX_ITERATIONS}]")
        if dt <= 0:
            raise ValueError("dt must be positive")
        self.store = store
        self.oracle = oracle
        self.instability_threshold = float(instability_threshold)
        self.stability_epsilon = float(stability_epsilon)
        self.merge_fidelity_threshold = float(merge_fidelity_threshold)
        self.max_iterations = int(max_iterations)
        self.dt = float(dt)
        self._lock = threading.Lock()
        self._runs = 0
        self._failures = 0

    @property
    def runs(self) -> int:
        with self._lock:
            return self._runs

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    def run(self) -> OptimizationReport:
        before = float(self.oracle.instability())
        if before <= self.instability_threshold:
            return OptimizationReport(False, 0, 0, True, before, before)

        merged = self.store.merge_similar(self.merge_fidelity_threshold)
        iterations = 0
        after = before
        converged = False
        while iterations < self.max_iterations:
            self.oracle.evolve(self.dt)
            iterations += 1
            after = float(self.oracle.instability())
            if after < self.stability_epsilon:
                converged = True
                break

        with self._lock:
            self._runs += 1
            if not converged:
                self._failures += 1

        if converged:
            logger.info(
                "optimizer converged after %d iterations (instability %.4f -> %.4f, merged=%d)",
                iterations,
                before,
                after,
                merged,
            )
        else:
            logger.warning(
                "optimizer did not converge within %d iterations (instability %.4f -> %.4f)",
                iterations,
                before,
                after,
            )
        return OptimizationReport(True, merged, iterations, converged, before, after)

    def reset(self) -> None:
        with self._lock:
            self._runs = 0
            self._failures = 0


__all__ = ["MAX_ITERATIONS", "OptimizationReport", "Optimizer"]
