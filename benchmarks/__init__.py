"""Synthetic traffic generators for exercising the classification engine."""

from .synthetic import CELL_PAYLOAD_BYTES, attack_circuit, benign_circuit, synthetic_traffic

__all__ = ["CELL_PAYLOAD_BYTES", "attack_circuit", "benign_circuit", "synthetic_traffic"]
