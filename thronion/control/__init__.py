"""Threshold adaptation, forward/absorb decisions and optimisation."""

from .decision import CircuitAction, DecisionEngine, DecisionStatistics
from .optimizer import OptimizationReport, Optimizer
from .threshold import ThresholdController, ThresholdUpdate

__all__ = [
    "CircuitAction",
    "DecisionEngine",
    "DecisionStatistics",
    "OptimizationReport",
    "Optimizer",
    "ThresholdController",
    "ThresholdUpdate",
]
