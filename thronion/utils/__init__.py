"""Shared configuration and synchronisation helpers."""

from .config import SCORING_BACKENDS, EngineConfig, load_config
from .locks import ReadWriteLock

__all__ = ["EngineConfig", "ReadWriteLock", "SCORING_BACKENDS", "load_config"]
