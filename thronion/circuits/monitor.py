"""Bounded in-memory registry of circuits currently being observed."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import List, Optional

from thronion.circuits.models import CircuitMetadata


class CircuitMonitor:
    """Track circuit metadata up to ``max_circuits`` entries.

    When the monitor is full the oldest tracked circuit is dropped to make
    room. Re-tracking an existing id replaces the record without changing
    its position.
    """

    def __init__(self, max_circuits: int = 10_000) -> None:
        if max_circuits <= 0:
            raise ValueError("max_circuits must be positive")
        self.max_circuits = int(max_circuits)
        self._circuits: "OrderedDict[int, CircuitMetadata]" = OrderedDict()
        self._lock = threading.Lock()
        self._evicted = 0

    def track(self, circuit: CircuitMetadata) -> Optional[int]:
        """Record ``circuit``; return the id of the evicted circuit, if any."""

        evicted: Optional[int] = None
        with self._lock:
            if circuit.circuit_id in self._circuits:
                self._circuits[circuit.circuit_id] = circuit
                return None
            if len(self._circuits) >= self.max_circuits:
                evicted, _ = self._circuits.popitem(last=False)
                self._evicted += 1
            self._circuits[circuit.circuit_id] = circuit
        return evicted

    def get(self, circuit_id: int) -> Optional[CircuitMetadata]:
        with self._lock:
            return self._circuits.get(int(circuit_id))

    def remove(self, circuit_id: int) -> bool:
        with self._lock:
            return self._circuits.pop(int(circuit_id), None) is not None

    def circuit_ids(self) -> List[int]:
        with self._lock:
            return list(self._circuits.keys())

    @property
    def evicted(self) -> int:
        with self._lock:
            return self._evicted

    def __contains__(self, circuit_id: object) -> bool:
        with self._lock:
            return circuit_id in self._circuits

    def __len__(self) -> int:
        with self._lock:
            return len(self._circuits)


__all__ = ["CircuitMonitor"]
