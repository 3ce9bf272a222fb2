"""Synthetic onion-service circuits for benchmarks, demos and tests."""

from __future__ import annotations

import random
from typing import List, Tuple

from thronion.circuits.models import CellType, CircuitMetadata

CELL_PAYLOAD_BYTES = 512

_INTRO_POINTS = [
    "intro-relay-a",
    "intro-relay-b",
    "intro-relay-c",
]


def benign_circuit(
    circuit_id: int,
    *,
    seed: int = 0,
    num_cells: int = 40,
    mean_gap: float = 0.05,
    gap_jitter: float = 0.01,
) -> CircuitMetadata:
    """A completed rendezvous carrying mostly data cells at human pace."""

    rng = random.Random(seed + circuit_id * 37)
    timings = [max(0.001, rng.gauss(mean_gap, gap_jitter)) for _ in range(num_cells)]
    cell_types = [CellType.RENDEZVOUS2]
    for _ in range(num_cells - 1):
        cell_types.append(CellType.PADDING if rng.random() < 0.1 else CellType.DATA)
    return CircuitMetadata(
        circuit_id=circuit_id,
        cell_timings=tuple(timings),
        cell_types=tuple(cell_types),
        total_bytes=rng.randint(20_000, 200_000),
        introduction_point=rng.choice(_INTRO_POINTS),
        rendezvous_completed=True,
    )


def attack_circuit(
    circuit_id: int,
    *,
    seed: int = 0,
    min_cells: int = 15,
    max_cells: int = 25,
    mean_gap: float = 1e-5,
) -> CircuitMetadata:
    """An INTRODUCE2 burst at machine pace that never completes a rendezvous."""

    rng = random.Random(seed + circuit_id * 37)
    num_cells = rng.randint(min_cells, max_cells)
    timings = [max(0.0, rng.gauss(mean_gap, mean_gap * 0.2)) for _ in range(num_cells)]
    return CircuitMetadata(
        circuit_id=circuit_id,
        cell_timings=tuple(timings),
        cell_types=tuple(CellType.INTRODUCE2 for _ in range(num_cells)),
        total_bytes=num_cells * CELL_PAYLOAD_BYTES,
        introduction_point=rng.choice(_INTRO_POINTS),
        rendezvous_completed=False,
    )


def synthetic_traffic(
    count: int,
    *,
    attack_ratio: float = 0.3,
    seed: int = 0,
    start_id: int = 1,
) -> List[Tuple[CircuitMetadata, bool]]:
    """Return ``count`` labelled circuits, roughly ``attack_ratio`` of them attacks."""

    if count < 0:
        raise ValueError("count must be non-negative")
    if not 0.0 <= attack_ratio <= 1.0:
        raise ValueError("attack_ratio must be in range [0, 1]")
    rng = random.Random(seed)
    traffic: List[Tuple[CircuitMetadata, bool]] = []
    for offset in range(count):
        circuit_id = start_id + offset
        if rng.random() < attack_ratio:
            traffic.append((attack_circuit(circuit_id, seed=seed), True))
        else:
            traffic.append((benign_circuit(circuit_id, seed=seed), False))
    return traffic


__all__ = [
    "CELL_PAYLOAD_BYTES",
    "attack_circuit",
    "benign_circuit",
    "synthetic_traffic",
]
