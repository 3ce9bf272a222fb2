"""Embedding protocol mapping classical signatures into state space."""

from __future__ import annotations

import math
from typing import Protocol, runtime_checkable

import numpy as np

from thronion.features.metadata import ClassicalSignature
from thronion.quantum.state import HILBERT_DIM, NULL_NORM_TOLERANCE, QuantumState


@runtime_checkable
class StateEmbedder(Protocol):
    """Deterministic, side-effect-free map from signatures to unit-norm states."""

    dimension: int

    def embed(self, signature: ClassicalSignature) -> QuantumState:
        """Return the state representing ``signature``."""


class HarmonicEmbedder:
    """Copy the five classical features into the first amplitudes and fill
    the remaining ``dimension - 5`` slots with sine-weighted harmonics.

    A feature vector with no usable direction (all zero, below the null-norm
    tolerance, or non-finite) embeds to the ground state ``|0>``.
    """

    def __init__(self, dimension: int = HILBERT_DIM) -> None:
        if dimension < 5:
            raise ValueError("dimension must be at least 5")
        self.dimension = int(dimension)
        self._harmonics = np.array(
            [math.sin(index * math.pi / self.dimension) for index in range(self.dimension)],
            dtype=np.float64,
        )

    def embed(self, signature: ClassicalSignature) -> QuantumState:
        features = signature.to_vector()
        with np.errstate(over="ignore", invalid="ignore"):
            norm = float(np.linalg.norm(features))
        if not math.isfinite(norm) or norm < NULL_NORM_TOLERANCE:
            return QuantumState.basis(0, self.dimension)
        amplitudes = np.zeros(self.dimension, dtype=np.complex128)
        width = features.size
        amplitudes[:width] = features
        for index in range(width, self.dimension):
            amplitudes[index] = features[index % width] * self._harmonics[index]
        return QuantumState(amplitudes)


__all__ = ["HarmonicEmbedder", "StateEmbedder"]
