"""Bounded, lock-protected collection of adaptive regions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import numpy as np

from thronion.classifier.region import ATTACK_REGION_THRESHOLD, Region
from thronion.classifier.scoring import HybridScorer
from thronion.features.metadata import ClassicalSignature
from thronion.quantum.state import QuantumState, fidelity
from thronion.utils.config import EngineConfig
from thronion.utils.locks import ReadWriteLock

logger = logging.getLogger(__name__)


class StoreState(str, Enum):
    """Lifecycle of the store, driven only by :meth:`RegionStore.learn`."""

    COLD = "cold"
    LEARNING = "learning"
    SATURATED = "saturated"


class LearnOutcome(str, Enum):
    UPDATED = "updated"
    CREATED = "created"
    EVICTED = "evicted"


@dataclass(frozen=True)
class Match:
    """Best region for a sample; ``index`` is ``None`` on an empty store."""

    index: Optional[int]
    resonance: float


@dataclass(frozen=True)
class Classification:
    is_attack: bool
    resonance: float
    region_index: Optional[int]
    attack_probability: Optional[float] = None

    def as_tuple(self) -> Tuple[bool, float, Optional[int]]:
        return self.is_attack, self.resonance, self.region_index


@dataclass(frozen=True)
class LearnResult:
    outcome: LearnOutcome
    index: int
    resonance: float


class RegionStore:
    """Learned regions guarded by one readers/writer lock.

    Reads (:meth:`find_best`, :meth:`classify`, snapshots) share the lock;
    :meth:`learn`, :meth:`merge_similar`, decay and pruning take it
    exclusively. The number of regions never exceeds ``max_regions``: once
    full, a weakly matching sample replaces the least confident region.
    """

    def __init__(
        self,
        max_regions: int = 100,
        *,
        scorer: Optional[HybridScorer] = None,
        learning_rate: float = 0.1,
        weak_match_threshold: float = 0.3,
        commit_threshold: float = 0.5,
        attack_region_threshold: float = ATTACK_REGION_THRESHOLD,
    ) -> None:
        if max_regions <= 0:
            raise ValueError("max_regions must be positive")
        if not 0.0 < learning_rate <= 1.0:
            raise ValueError("learning_rate must be in range (0, 1]")
        if not 0.0 <= weak_match_threshold <= commit_threshold <= 1.0:
            raise ValueError("thresholds must satisfy 0 <= weak <= commit <= 1")
        self.max_regions = int(max_regions)
        self.scorer = scorer or HybridScorer()
        self.learning_rate = float(learning_rate)
        self.weak_match_threshold = float(weak_match_threshold)
        self.commit_threshold = float(commit_threshold)
        self.attack_region_threshold = float(attack_region_threshold)
        self._regions: List[Region] = []
        self._lock = ReadWriteLock()

    @classmethod
    def from_config(cls, config: EngineConfig, scorer: Optional[HybridScorer] = None) -> "RegionStore":
        if scorer is None:
            scorer = HybridScorer(
                config.classical_weight,
                config.quantum_weight,
                backend=config.scoring_backend,
            )
        return cls(
            config.max_regions,
            scorer=scorer,
            learning_rate=config.learning_rate_alpha,
            weak_match_threshold=config.weak_match_threshold,
            commit_threshold=config.commit_threshold,
            attack_region_threshold=config.attack_region_threshold,
        )

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def find_best(self, signature: ClassicalSignature, state: QuantumState) -> Match:
        with self._lock.read_locked():
            return self._find_best(signature, state)

    def classify(self, signature: ClassicalSignature, state: QuantumState) -> Classification:
        """Attack verdict from the best-matching region.

        An empty store answers ``(False, 0.0, None)``. A best match at or
        below the weak-match threshold is treated as benign whatever the
        region holds.
        """

        with self._lock.read_locked():
            if not self._regions:
                return Classification(False, 0.0, None)
            match = self._find_best(signature, state)
            region = self._regions[match.index]  # type: ignore[index]
            if match.resonance > self.weak_match_threshold:
                return Classification(
                    is_attack=region.is_attack_region(self.attack_region_threshold),
                    resonance=match.resonance,
                    region_index=match.index,
                    attack_probability=region.attack_probability,
                )
            return Classification(False, match.resonance, match.index, region.attack_probability)

    def snapshot(self) -> List[Region]:
        with self._lock.read_locked():
            return [region.copy() for region in self._regions]

    def region(self, index: int) -> Region:
        with self._lock.read_locked():
            return self._regions[index].copy()

    def counts(self) -> Tuple[int, int]:
        """Return ``(attack_regions, benign_regions)``."""

        with self._lock.read_locked():
            attack = sum(
                1 for region in self._regions if region.is_attack_region(self.attack_region_threshold)
            )
            return attack, len(self._regions) - attack

    def global_coherence(self) -> float:
        """Mean region strength; 0 for an empty store."""

        with self._lock.read_locked():
            if not self._regions:
                return 0.0
            return float(np.mean([region.strength for region in self._regions]))

    def count_below(self, strength: float) -> int:
        with self._lock.read_locked():
            return sum(1 for region in self._regions if region.strength < strength)

    @property
    def state(self) -> StoreState:
        size = len(self)
        if size == 0:
            return StoreState.COLD
        if size < self.max_regions:
            return StoreState.LEARNING
        return StoreState.SATURATED

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._regions)

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------
    def learn(self, signature: ClassicalSignature, state: QuantumState, is_attack: bool) -> LearnResult:
        with self._lock.write_locked():
            match = self._find_best(signature, state)
            if match.index is not None and match.resonance > self.commit_threshold:
                self._regions[match.index].update(signature, state, is_attack)
                return LearnResult(LearnOutcome.UPDATED, match.index, match.resonance)

            region = Region.seed(signature, state, is_attack, self.learning_rate)
            if len(self._regions) < self.max_regions:
                self._regions.append(region)
                index = len(self._regions) - 1
                logger.debug(
                    "created region %d (attack=%s, resonance=%.3f)", index, is_attack, match.resonance
                )
                return LearnResult(LearnOutcome.CREATED, index, match.resonance)

            index = self._least_confident_index()
            evicted = self._regions[index]
            self._regions[index] = region
            logger.debug(
                "evicted region %d (attack_probability=%.3f, samples=%d)",
                index,
                evicted.attack_probability,
                evicted.sample_count,
            )
            return LearnResult(LearnOutcome.EVICTED, index, match.resonance)

    def merge_similar(self, fidelity_threshold: float) -> int:
        """Fold regions whose state centers exceed ``fidelity_threshold``.

        Later indices are processed first: each region ``j`` is merged into
        the first earlier region ``i < j`` it resonates with, then removed,
        so removals never shift an index still to be visited. Merging
        averages ``attack_probability`` weighted by sample count and sums
        the counts. Returns the number of regions removed.
        """

        if not 0.0 <= fidelity_threshold <= 1.0:
            raise ValueError("fidelity_threshold must be in range [0, 1]")
        merged = 0
        with self._lock.write_locked():
            for j in range(len(self._regions) - 1, 0, -1):
                later = self._regions[j]
                for i in range(j):
                    earlier = self._regions[i]
                    if fidelity(earlier.quantum_center, later.quantum_center) > fidelity_threshold:
                        self._absorb(earlier, later)
                        del self._regions[j]
                        merged += 1
                        break
        if merged:
            logger.info("merged %d similar regions (fidelity > %.3f)", merged, fidelity_threshold)
        return merged

    def apply_decay(self, factor: float) -> None:
        if not 0.0 <= factor <= 1.0:
            raise ValueError("decay factor must be in range [0, 1]")
        with self._lock.write_locked():
            for region in self._regions:
                region.strength *= factor

    def prune_stale(self, min_strength: float) -> int:
        """Drop regions whose strength decayed below ``min_strength``."""

        with self._lock.write_locked():
            before = len(self._regions)
            self._regions = [region for region in self._regions if region.strength >= min_strength]
            removed = before - len(self._regions)
        if removed:
            logger.info("pruned %d stale regions (strength < %.3f)", removed, min_strength)
        return removed

    def restore(self, regions: Iterable[Region]) -> None:
        """Replace the contents with copies of ``regions``."""

        replacement = [region.copy() for region in regions]
        if len(replacement) > self.max_regions:
            raise ValueError(
                f"cannot restore {len(replacement)} regions into a store of capacity {self.max_regions}"
            )
        with self._lock.write_locked():
            self._regions = replacement

    def clear(self) -> None:
        with self._lock.write_locked():
            self._regions.clear()

    # ------------------------------------------------------------------
    # internal helpers (caller holds the lock)
    # ------------------------------------------------------------------
    def _find_best(self, signature: ClassicalSignature, state: QuantumState) -> Match:
        if not self._regions:
            return Match(None, 0.0)
        scores = self.scorer.score_all(self._regions, signature, state)
        index = int(np.argmax(scores))
        return Match(index, float(scores[index]))

    def _least_confident_index(self) -> int:
        best_index = 0
        best_confidence = float("inf")
        for index, region in enumerate(self._regions):
            confidence = region.confidence()
            if confidence < best_confidence:
                best_confidence = confidence
                best_index = index
        return best_index

    @staticmethod
    def _absorb(target: Region, source: Region) -> None:
        total = target.sample_count + source.sample_count
        if total > 0:
            target.attack_probability = (
                target.sample_count * target.attack_probability
                + source.sample_count * source.attack_probability
            ) / total
        target.sample_count = total
        target.strength = max(target.strength, source.strength)


__all__ = [
    "Classification",
    "LearnOutcome",
    "LearnResult",
    "Match",
    "RegionStore",
    "StoreState",
]
