"""Circuit, signature and state helpers exposed as pytest fixtures."""

from __future__ import annotations

import math
from typing import List, Tuple

import pytest

from benchmarks.synthetic import attack_circuit, benign_circuit, synthetic_traffic
from thronion.circuits.models import CellType, CircuitMetadata
from thronion.features.metadata import ClassicalSignature
from thronion.quantum.state import QuantumState
from thronion.utils.config import EngineConfig


def make_state(*amplitudes: complex, dim: int = 13) -> QuantumState:
    """State whose leading amplitudes are ``amplitudes`` (zero-padded to ``dim``)."""

    values = list(amplitudes) + [0.0] * (dim - len(amplitudes))
    return QuantumState(values)


def tilted_state(fidelity_with_ground: float, dim: int = 13) -> QuantumState:
    """State with the requested fidelity against ``|0>``."""

    return make_state(math.sqrt(fidelity_with_ground), math.sqrt(1.0 - fidelity_with_ground), dim=dim)


def make_signature(mean_ms: float = 1.0, std_ms: float = 0.0, data: float = 1.0) -> ClassicalSignature:
    return ClassicalSignature(
        mean_interval=mean_ms * 1000.0,
        std_dev_interval=std_ms * 1000.0,
        data_ratio=data,
        intro_ratio=0.0,
        log_total_bytes=1.0,
    )


def steady_circuit(circuit_id: int = 1) -> CircuitMetadata:
    """Identical circuit on every call: eight data cells 2 ms apart."""

    return CircuitMetadata(
        circuit_id=circuit_id,
        cell_timings=(0.002,) * 8,
        cell_types=(CellType.DATA,) * 8,
        total_bytes=4096,
        created_at=0.0,
    )


@pytest.fixture()
def benign_sample() -> CircuitMetadata:
    return benign_circuit(1, seed=123)


@pytest.fixture()
def attack_sample() -> CircuitMetadata:
    return attack_circuit(2, seed=123)


@pytest.fixture()
def small_config() -> EngineConfig:
    return EngineConfig(max_regions=16)


@pytest.fixture()
def labelled_traffic() -> List[Tuple[CircuitMetadata, bool]]:
    return synthetic_traffic(60, attack_ratio=0.4, seed=5)


__all__ = [
    "attack_sample",
    "benign_sample",
    "labelled_traffic",
    "make_signature",
    "make_state",
    "small_config",
    "steady_circuit",
    "tilted_state",
]
