"""Unit-norm complex state vectors and the fidelity measure."""

from __future__ import annotations

from typing import Any, Iterable, List, Sequence

import numpy as np

from thronion.errors import DegenerateStateError, DimensionMismatchError

HILBERT_DIM = 13
NULL_NORM_TOLERANCE = 1e-10


class QuantumState:
    """Immutable normalised vector ``|psi> = sum_i a_i |i>`` with ``sum |a_i|^2 = 1``.

    Any non-null amplitude vector is accepted and normalised on construction.
    A vector whose norm is below ``1e-10`` cannot be normalised and raises
    :class:`~thronion.errors.DegenerateStateError`.
    """

    __slots__ = ("_amplitudes",)

    def __init__(self, amplitudes: Iterable[complex]) -> None:
        raw = amplitudes if isinstance(amplitudes, np.ndarray) else list(amplitudes)
        values = np.array(raw, dtype=np.complex128).reshape(-1)
        if values.size == 0:
            raise DegenerateStateError("quantum state requires at least one amplitude")
        norm = float(np.linalg.norm(values))
        if not np.isfinite(norm) or norm < NULL_NORM_TOLERANCE:
            raise DegenerateStateError("cannot normalise a null vector into a quantum state")
        values = values / norm
        values.setflags(write=False)
        self._amplitudes = values

    @classmethod
    def basis(cls, index: int, dim: int = HILBERT_DIM) -> "QuantumState":
        if not 0 <= index < dim:
            raise ValueError(f"basis index must be in range [0, {dim}), got {index}")
        values = np.zeros(dim, dtype=np.complex128)
        values[index] = 1.0
        return cls(values)

    @classmethod
    def uniform(cls, dim: int = HILBERT_DIM) -> "QuantumState":
        if dim <= 0:
            raise ValueError("dim must be positive")
        return cls(np.ones(dim, dtype=np.complex128))

    @property
    def amplitudes(self) -> np.ndarray:
        return self._amplitudes

    @property
    def dim(self) -> int:
        return int(self._amplitudes.size)

    def norm(self) -> float:
        return float(np.linalg.norm(self._amplitudes))

    def is_normalized(self, tolerance: float = 1e-10) -> bool:
        return abs(self.norm() - 1.0) < tolerance

    def inner_product(self, other: "QuantumState") -> complex:
        """``<self|other>``, conjugating the left operand."""

        if other.dim != self.dim:
            raise DimensionMismatchError(
                f"cannot compare states of dimension {self.dim} and {other.dim}"
            )
        return complex(np.vdot(self._amplitudes, other._amplitudes))

    def fidelity(self, other: "QuantumState") -> float:
        return fidelity(self, other)

    def probabilities(self) -> np.ndarray:
        return np.abs(self._amplitudes) ** 2

    def to_list(self) -> List[List[float]]:
        return [[float(value.real), float(value.imag)] for value in self._amplitudes]

    @classmethod
    def from_list(cls, payload: Sequence[Sequence[Any]]) -> "QuantumState":
        return cls(complex(float(pair[0]), float(pair[1])) for pair in payload)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuantumState):
            return NotImplemented
        return self.dim == other.dim and bool(np.allclose(self._amplitudes, other._amplitudes))

    def __hash__(self) -> int:
        return hash(tuple(np.round(self._amplitudes, 12).tolist()))

    def __repr__(self) -> str:
        return f"QuantumState(dim={self.dim}, norm={self.norm():.6f})"


def fidelity(a: QuantumState, b: QuantumState) -> float:
    """``|<a|b>|^2`` clipped to ``[0, 1]`` against rounding drift."""

    overlap = a.inner_product(b)
    value = overlap.real * overlap.real + overlap.imag * overlap.imag
    return float(min(1.0, max(0.0, value)))


__all__ = ["HILBERT_DIM", "NULL_NORM_TOLERANCE", "QuantumState", "fidelity"]
