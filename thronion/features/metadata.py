"""Timing and cell-type summaries and the compact classical signature."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Sequence

import numpy as np

from thronion.circuits.models import CellType, CircuitMetadata

_MICROS_PER_SECOND = 1_000_000.0


@dataclass(frozen=True)
class TimingFeatures:
    """Inter-cell gap statistics expressed in microseconds."""

    mean_interval: float = 0.0
    std_dev_interval: float = 0.0
    min_interval: float = 0.0
    max_interval: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class CellTypeDistribution:
    """Share of each cell category in a circuit (zeros when no cells were seen)."""

    data_ratio: float = 0.0
    intro_ratio: float = 0.0
    rendezvous_ratio: float = 0.0
    padding_ratio: float = 0.0
    other_ratio: float = 0.0
    total: int = 0


def extract_timing_features(timings: Sequence[float]) -> TimingFeatures:
    """Summarise gaps given in seconds.

    An empty sequence yields all zeros, and so do gaps whose statistics
    overflow, keeping only the count.
    """

    if len(timings) == 0:
        return TimingFeatures()
    with np.errstate(over="ignore", invalid="ignore"):
        micros = np.asarray(timings, dtype=np.float64) * _MICROS_PER_SECOND
        summary = (
            float(micros.mean()),
            float(micros.std()),
            float(micros.min()),
            float(micros.max()),
        )
    if not all(math.isfinite(value) for value in summary):
        return TimingFeatures(count=int(micros.size))
    mean, std, low, high = summary
    return TimingFeatures(
        mean_interval=mean,
        std_dev_interval=std,
        min_interval=low,
        max_interval=high,
        count=int(micros.size),
    )


def analyze_cell_types(cell_types: Sequence[CellType]) -> CellTypeDistribution:
    total = len(cell_types)
    if total == 0:
        return CellTypeDistribution()
    counts: Dict[CellType, int] = {member: 0 for member in CellType}
    for cell in cell_types:
        counts[CellType.parse(cell)] += 1
    scale = 1.0 / float(total)
    return CellTypeDistribution(
        data_ratio=counts[CellType.DATA] * scale,
        intro_ratio=counts[CellType.INTRODUCE2] * scale,
        rendezvous_ratio=(counts[CellType.RENDEZVOUS1] + counts[CellType.RENDEZVOUS2]) * scale,
        padding_ratio=counts[CellType.PADDING] * scale,
        other_ratio=counts[CellType.OTHER] * scale,
        total=total,
    )


@dataclass(frozen=True)
class ClassicalSignature:
    """Five-feature summary of a circuit used for classical distance scoring.

    Intervals are stored in microseconds and reported in milliseconds by
    :meth:`to_vector`. ``log_total_bytes`` is ``ln(1 + bytes / 1024)`` so an
    empty circuit maps to zero instead of ``-inf``.
    """

    mean_interval: float = 0.0
    std_dev_interval: float = 0.0
    data_ratio: float = 0.0
    intro_ratio: float = 0.0
    log_total_bytes: float = 0.0

    @classmethod
    def from_features(
        cls,
        timing: TimingFeatures,
        distribution: CellTypeDistribution,
        total_bytes: int,
    ) -> "ClassicalSignature":
        return cls(
            mean_interval=timing.mean_interval,
            std_dev_interval=timing.std_dev_interval,
            data_ratio=distribution.data_ratio,
            intro_ratio=distribution.intro_ratio,
            log_total_bytes=math.log1p(max(0, int(total_bytes)) / 1024.0),
        )

    @classmethod
    def from_circuit(cls, circuit: CircuitMetadata) -> "ClassicalSignature":
        return cls.from_features(
            extract_timing_features(circuit.cell_timings),
            analyze_cell_types(circuit.cell_types),
            circuit.total_bytes,
        )

    def to_vector(self) -> np.ndarray:
        return np.array(
            [
                self.mean_interval / 1000.0,
                self.std_dev_interval / 1000.0,
                self.data_ratio,
                self.intro_ratio,
                self.log_total_bytes,
            ],
            dtype=np.float64,
        )

    def blend(self, other: "ClassicalSignature", alpha: float) -> "ClassicalSignature":
        """Exponential moving average step towards ``other``."""

        keep = 1.0 - alpha
        return ClassicalSignature(
            mean_interval=keep * self.mean_interval + alpha * other.mean_interval,
            std_dev_interval=keep * self.std_dev_interval + alpha * other.std_dev_interval,
            data_ratio=keep * self.data_ratio + alpha * other.data_ratio,
            intro_ratio=keep * self.intro_ratio + alpha * other.intro_ratio,
            log_total_bytes=keep * self.log_total_bytes + alpha * other.log_total_bytes,
        )

    def as_dict(self) -> Dict[str, float]:
        return {
            "mean_interval": float(self.mean_interval),
            "std_dev_interval": float(self.std_dev_interval),
            "data_ratio": float(self.data_ratio),
            "intro_ratio": float(self.intro_ratio),
            "log_total_bytes": float(self.log_total_bytes),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ClassicalSignature":
        return cls(**{key: float(payload.get(key, 0.0)) for key in cls.__dataclass_fields__})


__all__ = [
    "CellTypeDistribution",
    "ClassicalSignature",
    "TimingFeatures",
    "analyze_cell_types",
    "extract_timing_features",
]
