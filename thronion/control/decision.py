"""Forward/absorb decisions and their counters."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class CircuitAction(str, Enum):
    FORWARD = "forward"
    ABSORB = "absorb"


@dataclass(frozen=True)
class DecisionStatistics:
    total: int = 0
    forwarded: int = 0
    absorbed: int = 0

    @property
    def absorption_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.absorbed / self.total

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "forwarded": self.forwarded,
            "absorbed": self.absorbed,
            "absorption_rate": self.absorption_rate,
        }


class DecisionEngine:
    """``FORWARD`` when the score clears the threshold, otherwise ``ABSORB``."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._forwarded = 0
        self._absorbed = 0

    def decide(self, score: float, threshold: float) -> CircuitAction:
        action = CircuitAction.FORWARD if score > threshold else CircuitAction.ABSORB
        with self._lock:
            self._total += 1
            if action is CircuitAction.FORWARD:
                self._forwarded += 1
            else:
                self._absorbed += 1
        return action

    def statistics(self) -> DecisionStatistics:
        with self._lock:
            return DecisionStatistics(self._total, self._forwarded, self._absorbed)

    def reset(self) -> None:
        with self._lock:
            self._total = 0
            self._forwarded = 0
            self._absorbed = 0


__all__ = ["CircuitAction", "DecisionEngine", "DecisionStatistics"]
