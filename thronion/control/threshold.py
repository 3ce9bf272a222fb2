"""Gradient-driven absorption threshold."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict


@dataclass(frozen=True)
class ThresholdUpdate:
    """Record of a single threshold step."""

    previous: float
    current: float
    gradient: float
    coherence: float
    flood_energy: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "previous": float(self.previous),
            "current": float(self.current),
            "gradient": float(self.gradient),
            "coherence": float(self.coherence),
            "flood_energy": float(self.flood_energy),
        }


class ThresholdController:
    """Hold the decision threshold and the rolling absorption window.

    ``update`` applies ``theta <- clamp(theta - lr * (-coherence + kappa * flood), 0, 1)``.
    Absorption outcomes land in a window of ``window`` entries; the oldest
    is dropped on overflow.
    """

    def __init__(
        self,
        initial: float = 0.5,
        *,
        learning_rate: float = 0.001,
        kappa: float = 0.2,
        target_rate: float = 0.95,
        tolerance: float = 0.05,
        window: int = 1000,
    ) -> None:
        if not 0.0 <= initial <= 1.0:
            raise ValueError("initial threshold must be in range [0, 1]")
        if learning_rate < 0:
            raise ValueError("learning_rate must be non-negative")
        if kappa < 0:
            raise ValueError("kappa must be non-negative")
        if not 0.0 <= target_rate <= 1.0:
            raise ValueError("target_rate must be in range [0, 1]")
        if tolerance <= 0:
            raise ValueError("tolerance must be positive")
        if window <= 0:
            raise ValueError("window must be positive")

        self.initial = float(initial)
        self.learning_rate = float(learning_rate)
        self.kappa = float(kappa)
        self.target_rate = float(target_rate)
        self.tolerance = float(tolerance)
        self._lock = threading.Lock()
        self._value = self.initial
        self._window: Deque[bool] = deque(maxlen=int(window))
        self._absorbed_in_window = 0

    @property
    def window_size(self) -> int:
        return self._window.maxlen or 0

    def value(self) -> float:
        with self._lock:
            return self._value

    def update(self, coherence: float, flood_energy: float) -> ThresholdUpdate:
        gradient = -float(coherence) + self.kappa * float(flood_energy)
        with self._lock:
            previous = self._value
            self._value = min(1.0, max(0.0, previous - self.learning_rate * gradient))
            current = self._value
        return ThresholdUpdate(previous, current, gradient, float(coherence), float(flood_energy))

    def record_absorption(self, was_absorbed: bool) -> None:
        with self._lock:
            if len(self._window) == self._window.maxlen and self._window[0]:
                self._absorbed_in_window -= 1
            self._window.append(bool(was_absorbed))
            if was_absorbed:
                self._absorbed_in_window += 1

    def absorption_rate(self) -> float:
        with self._lock:
            if not self._window:
                return 0.0
            return self._absorbed_in_window / len(self._window)

    def observations(self) -> int:
        with self._lock:
            return len(self._window)

    def has_converged(self) -> bool:
        return abs(self.absorption_rate() - self.target_rate) < self.tolerance

    def reset(self) -> None:
        """Restore the initial threshold and clear the window."""

        with self._lock:
            self._value = self.initial
            self._window.clear()
            self._absorbed_in_window = 0


__all__ = ["ThresholdController", "ThresholdUpdate"]
