"""Top-level package for thronion."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .circuits import CellType, CircuitMetadata, CircuitMonitor
from .engine import ClassificationEngine, Decision, EngineStats, Verdict
from .errors import ConfigInvalidError, DegenerateStateError, DimensionMismatchError, ThronionError
from .utils.config import EngineConfig, load_config

try:
    __version__ = version("thronion")
except PackageNotFoundError:  # pragma: no cover - fallback when package not installed
    __version__ = "0.1.0"

__all__ = [
    "__version__",
    "CellType",
    "CircuitMetadata",
    "CircuitMonitor",
    "ClassificationEngine",
    "ConfigInvalidError",
    "Decision",
    "DegenerateStateError",
    "DimensionMismatchError",
    "EngineConfig",
    "EngineStats",
    "ThronionError",
    "Verdict",
    "load_config",
]
