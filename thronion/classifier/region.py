"""Adaptive regions: the learned memory of the classifier."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping

from thronion.features.metadata import ClassicalSignature
from thronion.quantum.state import QuantumState

ATTACK_REGION_THRESHOLD = 0.7


@dataclass
class Region:
    """One traffic cluster holding a classical centroid and a state center.

    ``classical_center`` and ``attack_probability`` follow an exponential
    moving average with rate ``learning_rate``; ``quantum_center`` is replaced
    by the latest sample. ``strength`` is a relevance signal in ``[0, 1]``
    refreshed on every update and faded by decay.
    """

    classical_center: ClassicalSignature
    quantum_center: QuantumState
    learning_rate: float
    sample_count: int = 1
    attack_probability: float = 0.0
    strength: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 < self.learning_rate <= 1.0:
            raise ValueError("learning_rate must be in range (0, 1]")
        if self.sample_count < 0:
            raise ValueError("sample_count must be non-negative")
        if not 0.0 <= self.attack_probability <= 1.0:
            raise ValueError("attack_probability must be in range [0, 1]")
        if not 0.0 <= self.strength <= 1.0:
            raise ValueError("strength must be in range [0, 1]")

    @classmethod
    def seed(
        cls,
        signature: ClassicalSignature,
        state: QuantumState,
        is_attack: bool,
        learning_rate: float,
    ) -> "Region":
        """Region created from a single labelled sample."""

        return cls(
            classical_center=signature,
            quantum_center=state,
            learning_rate=learning_rate,
            sample_count=1,
            attack_probability=1.0 if is_attack else 0.0,
        )

    def update(self, signature: ClassicalSignature, state: QuantumState, is_attack: bool) -> None:
        alpha = self.learning_rate
        self.sample_count += 1
        self.classical_center = self.classical_center.blend(signature, alpha)
        self.quantum_center = state
        indicator = 1.0 if is_attack else 0.0
        self.attack_probability = (1.0 - alpha) * self.attack_probability + alpha * indicator
        self.strength = 1.0

    def is_attack_region(self, threshold: float = ATTACK_REGION_THRESHOLD) -> bool:
        return self.attack_probability > threshold

    def confidence(self) -> float:
        """Distance of ``attack_probability`` from the undecided midpoint."""

        return abs(self.attack_probability - 0.5)

    def copy(self) -> "Region":
        return replace(self)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "classical_center": self.classical_center.as_dict(),
            "quantum_center": self.quantum_center.to_list(),
            "learning_rate": float(self.learning_rate),
            "sample_count": int(self.sample_count),
            "attack_probability": float(self.attack_probability),
            "strength": float(self.strength),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Region":
        return cls(
            classical_center=ClassicalSignature.from_dict(dict(payload["classical_center"])),
            quantum_center=QuantumState.from_list(payload["quantum_center"]),
            learning_rate=float(payload["learning_rate"]),
            sample_count=int(payload.get("sample_count", 1)),
            attack_probability=float(payload.get("attack_probability", 0.0)),
            strength=float(payload.get("strength", 1.0)),
        )


__all__ = ["ATTACK_REGION_THRESHOLD", "Region"]
