"""Circuit metadata records consumed by the feature extractor."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Tuple, Union


class CellType(str, Enum):
    """Relay cell categories relevant to onion-service traffic analysis."""

    INTRODUCE2 = "introduce2"
    RENDEZVOUS1 = "rendezvous1"
    RENDEZVOUS2 = "rendezvous2"
    DATA = "data"
    PADDING = "padding"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Union[str, "CellType"]) -> "CellType":
        """Map a raw tag (case-insensitive) to a :class:`CellType`.

        Unknown tags fall into :attr:`OTHER` rather than raising, since the
        control port may report cell commands this module does not model.
        """

        if isinstance(value, CellType):
            return value
        token = str(value).strip().lower().replace("_", "")
        for member in cls:
            if member.value == token:
                return member
        return cls.OTHER


def _as_timings(values: Iterable[Any]) -> Tuple[float, ...]:
    timings = tuple(float(value) for value in values)
    if not all(math.isfinite(value) for value in timings):
        raise ValueError("cell timings must be finite")
    if any(value < 0 for value in timings):
        raise ValueError("cell timings must be non-negative")
    return timings


@dataclass(frozen=True)
class CircuitMetadata:
    """Per-circuit observation: timing gaps (seconds), cell tags and byte count."""

    circuit_id: int
    cell_timings: Tuple[float, ...] = ()
    cell_types: Tuple[CellType, ...] = ()
    total_bytes: int = 0
    created_at: float = field(default_factory=time.monotonic)
    introduction_point: Optional[str] = None
    rendezvous_completed: bool = False

    def __post_init__(self) -> None:  # type: ignore[override]
        object.__setattr__(self, "circuit_id", int(self.circuit_id))
        object.__setattr__(self, "cell_timings", _as_timings(self.cell_timings))
        object.__setattr__(
            self, "cell_types", tuple(CellType.parse(tag) for tag in self.cell_types)
        )
        if self.total_bytes < 0:
            raise ValueError("total_bytes must be non-negative")
        object.__setattr__(self, "total_bytes", int(self.total_bytes))
        object.__setattr__(self, "created_at", float(self.created_at))

    def age(self, now: Optional[float] = None) -> float:
        """Seconds elapsed since the circuit was created, never negative."""

        current = time.monotonic() if now is None else float(now)
        return max(0.0, current - self.created_at)

    @property
    def cell_count(self) -> int:
        return len(self.cell_timings)

    def as_dict(self) -> dict[str, Any]:
        return {
            "circuit_id": self.circuit_id,
            "cell_timings": list(self.cell_timings),
            "cell_types": [cell.value for cell in self.cell_types],
            "total_bytes": self.total_bytes,
            "created_at": self.created_at,
            "introduction_point": self.introduction_point,
            "rendezvous_completed": self.rendezvous_completed,
        }


__all__ = ["CellType", "CircuitMetadata"]
