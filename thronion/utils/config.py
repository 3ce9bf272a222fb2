"""Configuration dataclasses for the classification engine."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

from thronion.errors import ConfigInvalidError

SCORING_BACKENDS = ("numpy", "torch")


def _require_number(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigInvalidError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigInvalidError(f"{name} must be finite, got {value!r}")


def _require_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigInvalidError(f"{name} must be an integer, got {value!r}")


def _require_unit_interval(name: str, value: float) -> None:
    _require_number(name, value)
    if not 0.0 <= value <= 1.0:
        raise ConfigInvalidError(f"{name} must be in range [0, 1], got {value!r}")


def _require_positive(name: str, value: float) -> None:
    _require_number(name, value)
    if value <= 0:
        raise ConfigInvalidError(f"{name} must be positive, got {value!r}")


def _require_non_negative(name: str, value: float) -> None:
    _require_number(name, value)
    if value < 0:
        raise ConfigInvalidError(f"{name} must be non-negative, got {value!r}")


@dataclass(frozen=True)
class EngineConfig:
    """Tunable parameters for the hybrid resonance classification engine.

    Attributes
    ----------
    max_regions:
        Upper bound on the number of learned regions held in memory.
    spectral_dim:
        Length of the spectral signature produced by the feature extractor.
    spectral_bins:
        Number of leading FFT magnitude bins copied into the signature.
    hilbert_dim:
        Dimension of the complex space that classical signatures embed into.
    learning_rate_alpha:
        EMA rate used when a sample updates an existing region.
    decay_rate_beta:
        Fraction of region strength lost on every maintenance pass.
    initial_threshold:
        Starting value of the forward/absorb decision threshold.
    threshold_learning_rate:
        Step size of the threshold gradient update.
    target_absorption_rate:
        Absorption rate the threshold controller considers calibrated.
    merge_fidelity_threshold:
        Quantum fidelity above which the optimizer merges two regions.
    classical_weight, quantum_weight:
        Weights of the classical and quantum sub-scores; must sum to one.
    """

    max_regions: int = 100
    spectral_dim: int = 128
    spectral_bins: int = 120
    hilbert_dim: int = 13
    learning_rate_alpha: float = 0.1
    decay_rate_beta: float = 0.001
    initial_threshold: float = 0.5
    threshold_learning_rate: float = 0.001
    target_absorption_rate: float = 0.95
    absorption_tolerance: float = 0.05
    absorption_window: int = 1000
    optimization_interval: int = 100
    merge_fidelity_threshold: float = 0.9
    classical_weight: float = 0.3
    quantum_weight: float = 0.7
    flood_gradient_kappa: float = 0.2
    weak_match_threshold: float = 0.3
    commit_threshold: float = 0.5
    attack_region_threshold: float = 0.7
    instability_threshold: float = 0.1
    stability_epsilon: float = 0.05
    max_optimization_iterations: int = 10
    oracle_dt: float = 0.01
    prune_strength_floor: float = 0.0
    scoring_backend: str = "numpy"

    def __post_init__(self) -> None:  # type: ignore[override]
        for name in (
            "max_regions",
            "spectral_dim",
            "spectral_bins",
            "hilbert_dim",
            "absorption_window",
            "optimization_interval",
            "max_optimization_iterations",
        ):
            _require_int(name, getattr(self, name))
        for name in (
            "learning_rate_alpha",
            "decay_rate_beta",
            "absorption_tolerance",
            "prune_strength_floor",
        ):
            _require_number(name, getattr(self, name))
        _require_positive("max_regions", self.max_regions)
        _require_positive("spectral_dim", self.spectral_dim)
        _require_positive("spectral_bins", self.spectral_bins)
        if self.spectral_dim < self.spectral_bins + 8:
            raise ConfigInvalidError(
                "spectral_dim must leave room for the 8 statistical features "
                f"(spectral_bins={self.spectral_bins}, spectral_dim={self.spectral_dim})"
            )
        if self.hilbert_dim < 5:
            raise ConfigInvalidError("hilbert_dim must be at least 5")
        if not 0.0 < self.learning_rate_alpha <= 1.0:
            raise ConfigInvalidError("learning_rate_alpha must be in range (0, 1]")
        if not 0.0 <= self.decay_rate_beta < 1.0:
            raise ConfigInvalidError("decay_rate_beta must be in range [0, 1)")
        _require_unit_interval("initial_threshold", self.initial_threshold)
        _require_non_negative("threshold_learning_rate", self.threshold_learning_rate)
        _require_unit_interval("target_absorption_rate", self.target_absorption_rate)
        if not 0.0 < self.absorption_tolerance <= 1.0:
            raise ConfigInvalidError("absorption_tolerance must be in range (0, 1]")
        _require_positive("absorption_window", self.absorption_window)
        _require_positive("optimization_interval", self.optimization_interval)
        _require_unit_interval("merge_fidelity_threshold", self.merge_fidelity_threshold)
        _require_non_negative("classical_weight", self.classical_weight)
        _require_non_negative("quantum_weight", self.quantum_weight)
        if abs(self.classical_weight + self.quantum_weight - 1.0) > 1e-9:
            raise ConfigInvalidError("classical_weight and quantum_weight must sum to 1")
        _require_non_negative("flood_gradient_kappa", self.flood_gradient_kappa)
        _require_unit_interval("weak_match_threshold", self.weak_match_threshold)
        _require_unit_interval("commit_threshold", self.commit_threshold)
        _require_unit_interval("attack_region_threshold", self.attack_region_threshold)
        if self.weak_match_threshold > self.commit_threshold:
            raise ConfigInvalidError("weak_match_threshold must not exceed commit_threshold")
        _require_non_negative("instability_threshold", self.instability_threshold)
        _require_positive("stability_epsilon", self.stability_epsilon)
        if not 1 <= self.max_optimization_iterations <= 10:
            raise ConfigInvalidError("max_optimization_iterations must be in range [1, 10]")
        _require_positive("oracle_dt", self.oracle_dt)
        if not 0.0 <= self.prune_strength_floor < 1.0:
            raise ConfigInvalidError("prune_strength_floor must be in range [0, 1)")
        if self.scoring_backend not in SCORING_BACKENDS:
            raise ConfigInvalidError(
                f"scoring_backend must be one of {SCORING_BACKENDS}, got {self.scoring_backend!r}"
            )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "EngineConfig":
        """Build a configuration from a plain mapping, rejecting unknown keys."""

        if not isinstance(payload, Mapping):
            raise ConfigInvalidError("configuration payload must be a mapping")
        section = payload.get("thronion", payload)
        if not isinstance(section, Mapping):
            raise ConfigInvalidError("'thronion' section must be a mapping")
        known = {item.name for item in fields(cls)}
        unknown = sorted(str(key) for key in section if key not in known)
        if unknown:
            raise ConfigInvalidError(f"unknown configuration keys: {', '.join(unknown)}")
        return cls(**{str(key): value for key, value in section.items()})

    @classmethod
    def from_yaml(cls, text: str) -> "EngineConfig":
        data = yaml.safe_load(text) or {}
        return cls.from_mapping(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_yaml(self) -> str:
        return yaml.safe_dump({"thronion": self.to_dict()}, sort_keys=False)


def load_config(path: Union[str, Path]) -> EngineConfig:
    """Read and validate an :class:`EngineConfig` from a YAML file."""

    config_path = Path(path)
    return EngineConfig.from_yaml(config_path.read_text(encoding="utf-8"))


__all__ = ["EngineConfig", "SCORING_BACKENDS", "load_config"]
