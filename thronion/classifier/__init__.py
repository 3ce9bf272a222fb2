"""Region learning, hybrid scoring and persistence."""

from .persistence import load_regions, save_regions
from .region import ATTACK_REGION_THRESHOLD, Region
from .scoring import BACKENDS, HybridScorer, euclidean
from .store import (
    Classification,
    LearnOutcome,
    LearnResult,
    Match,
    RegionStore,
    StoreState,
)

__all__ = [
    "ATTACK_REGION_THRESHOLD",
    "BACKENDS",
    "Classification",
    "HybridScorer",
    "LearnOutcome",
    "LearnResult",
    "Match",
    "Region",
    "RegionStore",
    "StoreState",
    "euclidean",
    "load_regions",
    "save_regions",
]
