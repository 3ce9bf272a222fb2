"""Coherence oracles reporting how far the system is from a stable point."""

from __future__ import annotations

import math
import threading
from typing import Optional, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class CoherenceOracle(Protocol):
    """Scalar instability signal; higher means more miscalibrated.

    ``instability`` must be a pure read returning a value ``>= 0``.
    ``evolve`` advances the oracle's internal dynamics by ``dt``.
    """

    def instability(self) -> float:
        """Return the current instability (``>= 0``)."""

    def evolve(self, dt: float) -> None:
        """Advance the oracle by one time step."""


class StaticCoherenceOracle:
    """Oracle returning a host-supplied value; ``evolve`` is a no-op."""

    def __init__(self, value: float = 0.0) -> None:
        self._lock = threading.Lock()
        self._value = 0.0
        self.set(value)

    def set(self, value: float) -> None:
        if value < 0 or not math.isfinite(value):
            raise ValueError("instability must be a finite non-negative number")
        with self._lock:
            self._value = float(value)

    def instability(self) -> float:
        with self._lock:
            return self._value

    def evolve(self, dt: float) -> None:
        return None


class KuramotoCoherenceOracle:
    """Phase-oscillator network whose desynchronisation drives instability.

    Each oscillator follows ``dphi_i/dt = omega_i + (K / N) sum_j sin(phi_j - phi_i)``,
    integrated with classical RK4. The instability is ``1 - r`` where ``r`` is
    the Kuramoto order parameter, so a fully synchronised network reports 0.
    """

    def __init__(
        self,
        num_oscillators: int = 13,
        *,
        base_frequency: float = 1.0,
        frequency_spread: float = 0.1,
        coupling_strength: float = 2.0,
        seed: Optional[int] = 0,
    ) -> None:
        if num_oscillators <= 0:
            raise ValueError("num_oscillators must be positive")
        if frequency_spread < 0:
            raise ValueError("frequency_spread must be non-negative")
        if coupling_strength < 0:
            raise ValueError("coupling_strength must be non-negative")
        self.num_oscillators = int(num_oscillators)
        self.coupling_strength = float(coupling_strength)
        self._rng = np.random.default_rng(seed)
        self._frequencies = self._rng.normal(
            float(base_frequency), float(frequency_spread), size=self.num_oscillators
        )
        self._lock = threading.Lock()
        self._phases = np.zeros(self.num_oscillators, dtype=np.float64)
        self.randomize_phases()

    @property
    def phases(self) -> np.ndarray:
        with self._lock:
            return self._phases.copy()

    def randomize_phases(self) -> None:
        """Scatter phases uniformly over ``[0, 2*pi)``, the unsynchronised state."""

        phases = self._rng.uniform(0.0, 2.0 * math.pi, size=self.num_oscillators)
        with self._lock:
            self._phases = phases

    def set_phases(self, phases: np.ndarray) -> None:
        values = np.asarray(phases, dtype=np.float64).reshape(-1)
        if values.size != self.num_oscillators:
            raise ValueError("phase vector length must match num_oscillators")
        with self._lock:
            self._phases = values.copy()

    def _derivatives(self, phases: np.ndarray) -> np.ndarray:
        differences = phases[np.newaxis, :] - phases[:, np.newaxis]
        coupling = np.sin(differences).sum(axis=1)
        return self._frequencies + (self.coupling_strength / self.num_oscillators) * coupling

    def evolve(self, dt: float) -> None:
        if dt <= 0:
            raise ValueError("dt must be positive")
        with self._lock:
            phases = self._phases
            k1 = self._derivatives(phases)
            k2 = self._derivatives(phases + 0.5 * dt * k1)
            k3 = self._derivatives(phases + 0.5 * dt * k2)
            k4 = self._derivatives(phases + dt * k3)
            updated = phases + (dt / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)
            self._phases = np.mod(updated, 2.0 * math.pi)

    def order_parameter(self) -> float:
        with self._lock:
            return float(np.abs(np.exp(1j * self._phases).mean()))

    def instability(self) -> float:
        return max(0.0, 1.0 - self.order_parameter())


__all__ = ["CoherenceOracle", "KuramotoCoherenceOracle", "StaticCoherenceOracle"]
