"""Hybrid classical-distance / quantum-fidelity resonance scoring."""

from __future__ import annotations

from typing import Sequence

import numpy as np
import torch

from thronion.classifier.region import Region
from thronion.errors import DimensionMismatchError
from thronion.features.metadata import ClassicalSignature
from thronion.quantum.state import QuantumState, fidelity

Backend = str
BACKENDS = ("numpy", "torch")


def euclidean(a: np.ndarray, b: np.ndarray) -> float:
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise DimensionMismatchError(f"shape mismatch: {a.shape} vs {b.shape}")
    return float(np.linalg.norm(a - b))


class HybridScorer:
    """Score ``w_c / (1 + d) + w_q * F`` between a sample and a region.

    ``d`` is the Euclidean distance between classical feature vectors and
    ``F`` the fidelity between states. With non-negative weights summing to
    one the score lies in ``[0, 1]``.
    """

    def __init__(
        self,
        classical_weight: float = 0.3,
        quantum_weight: float = 0.7,
        *,
        backend: Backend = "numpy",
    ) -> None:
        if classical_weight < 0 or quantum_weight < 0:
            raise ValueError("weights must be non-negative")
        if abs(classical_weight + quantum_weight - 1.0) > 1e-9:
            raise ValueError("classical_weight and quantum_weight must sum to 1")
        if backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got {backend!r}")
        self.classical_weight = float(classical_weight)
        self.quantum_weight = float(quantum_weight)
        self.backend = backend

    def classical_score(self, signature: ClassicalSignature, center: ClassicalSignature) -> float:
        return 1.0 / (1.0 + euclidean(signature.to_vector(), center.to_vector()))

    def resonance(
        self,
        region: Region,
        signature: ClassicalSignature,
        state: QuantumState,
    ) -> float:
        classical = self.classical_score(signature, region.classical_center)
        quantum = fidelity(state, region.quantum_center)
        return self.classical_weight * classical + self.quantum_weight * quantum

    def score_all(
        self,
        regions: Sequence[Region],
        signature: ClassicalSignature,
        state: QuantumState,
    ) -> np.ndarray:
        """Resonance of the sample against every region, in region order."""

        if not regions:
            return np.zeros(0, dtype=np.float64)
        centers = np.stack([region.classical_center.to_vector() for region in regions])
        states = np.stack([region.quantum_center.amplitudes for region in regions])
        if states.shape[1] != state.dim:
            raise DimensionMismatchError(
                f"region states have dimension {states.shape[1]}, sample has {state.dim}"
            )
        if self.backend == "torch":
            return self._score_torch(centers, states, signature.to_vector(), state.amplitudes)
        return self._score_numpy(centers, states, signature.to_vector(), state.amplitudes)

    def _score_numpy(
        self,
        centers: np.ndarray,
        states: np.ndarray,
        vector: np.ndarray,
        amplitudes: np.ndarray,
    ) -> np.ndarray:
        distances = np.linalg.norm(centers - vector[np.newaxis, :], axis=1)
        overlaps = states.conj() @ amplitudes
        fidelities = np.clip(np.abs(overlaps) ** 2, 0.0, 1.0)
        return self.classical_weight / (1.0 + distances) + self.quantum_weight * fidelities

    def _score_torch(
        self,
        centers: np.ndarray,
        states: np.ndarray,
        vector: np.ndarray,
        amplitudes: np.ndarray,
    ) -> np.ndarray:
        centers_t = torch.as_tensor(centers, dtype=torch.float64)
        vector_t = torch.as_tensor(vector, dtype=torch.float64)
        states_t = torch.as_tensor(states, dtype=torch.complex128)
        amplitudes_t = torch.as_tensor(np.array(amplitudes), dtype=torch.complex128)

        distances = torch.linalg.vector_norm(centers_t - vector_t.unsqueeze(0), dim=1)
        overlaps = (states_t.conj() * amplitudes_t.unsqueeze(0)).sum(dim=1)
        fidelities = torch.clamp(overlaps.abs() ** 2, 0.0, 1.0)
        scores = self.classical_weight / (1.0 + distances) + self.quantum_weight * fidelities
        return scores.cpu().numpy()


__all__ = ["BACKENDS", "HybridScorer", "euclidean"]
