"""Circuit metadata records and tracking."""

from .models import CellType, CircuitMetadata
from .monitor import CircuitMonitor

__all__ = ["CellType", "CircuitMetadata", "CircuitMonitor"]
