"""Exception hierarchy raised by the classification engine."""

from __future__ import annotations


class ThronionError(Exception):
    """Base class for all engine errors."""


class ConfigInvalidError(ThronionError, ValueError):
    """Raised when a configuration parameter lies outside its valid range."""


class DegenerateStateError(ThronionError, ValueError):
    """Raised when a quantum state would have to be built from a null vector."""


class DimensionMismatchError(ThronionError, ValueError):
    """Raised when two vectors that must share a dimension do not."""


__all__ = [
    "ConfigInvalidError",
    "DegenerateStateError",
    "DimensionMismatchError",
    "ThronionError",
]
