"""Classification engine wiring features, regions, threshold and optimizer."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import numpy as np

from thronion.circuits.models import CircuitMetadata
from thronion.classifier.persistence import load_regions, save_regions
from thronion.classifier.scoring import HybridScorer
from thronion.classifier.store import Classification, LearnResult, RegionStore
from thronion.control.decision import CircuitAction, DecisionEngine
from thronion.control.optimizer import OptimizationReport, Optimizer
from thronion.control.threshold import ThresholdController, ThresholdUpdate
from thronion.features.metadata import ClassicalSignature
from thronion.features.spectral import FeatureExtractor, Spectrum
from thronion.quantum.coherence import CoherenceOracle, KuramotoCoherenceOracle
from thronion.quantum.embedding import HarmonicEmbedder, StateEmbedder
from thronion.utils.config import EngineConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    circuit_id: int
    is_attack: bool
    resonance: float
    matched_region: Optional[int]
    attack_probability: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "circuit_id": self.circuit_id,
            "is_attack": self.is_attack,
            "resonance": float(self.resonance),
            "matched_region": self.matched_region,
            "attack_probability": self.attack_probability,
        }


@dataclass(frozen=True)
class Verdict:
    """Classification plus the forward/absorb action taken for a circuit."""

    decision: Decision
    action: CircuitAction
    score: float
    threshold: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            **self.decision.as_dict(),
            "action": self.action.value,
            "score": float(self.score),
            "threshold": float(self.threshold),
        }


@dataclass(frozen=True)
class CircuitProfile:
    signature: np.ndarray
    spectrum: Spectrum
    timing_entropy: float
    classical: ClassicalSignature


@dataclass(frozen=True)
class EngineStats:
    total_regions: int
    attack_regions: int
    benign_regions: int
    absorption_rate: float
    total_decisions: int
    forwarded: int
    absorbed: int
    threshold: float
    classification_count: int
    instability: float
    optimizer_runs: int
    optimizer_failures: int
    stale_regions: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total_regions": self.total_regions,
            "attack_regions": self.attack_regions,
            "benign_regions": self.benign_regions,
            "absorption_rate": float(self.absorption_rate),
            "total_decisions": self.total_decisions,
            "forwarded": self.forwarded,
            "absorbed": self.absorbed,
            "threshold": float(self.threshold),
            "classification_count": self.classification_count,
            "instability": float(self.instability),
            "optimizer_runs": self.optimizer_runs,
            "optimizer_failures": self.optimizer_failures,
            "stale_regions": self.stale_regions,
        }


@dataclass(frozen=True)
class MaintenanceReport:
    decay_factor: float
    pruned: int
    threshold: ThresholdUpdate
    optimization: OptimizationReport
    reseeded: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "decay_factor": float(self.decay_factor),
            "pruned": self.pruned,
            "threshold": self.threshold.as_dict(),
            "reseeded": self.reseeded,
            "optimization": self.optimization.as_dict(),
        }


class ClassificationEngine:
    """Hybrid resonance classifier for onion-service circuits.

    The engine owns a single :class:`RegionStore`; callers share it by
    sharing the engine. ``classify`` and ``process`` are safe to call from
    many threads while ``learn`` and the maintenance hooks run concurrently.

    Parameters
    ----------
    config:
        Validated :class:`EngineConfig`; defaults are used when omitted.
    embedder:
        Map from classical signatures to states. Defaults to
        :class:`HarmonicEmbedder` of ``config.hilbert_dim``.
    oracle:
        Coherence oracle consulted by the optimizer. Defaults to a
        :class:`KuramotoCoherenceOracle` with ``config.hilbert_dim`` oscillators.
    extractor:
        Feature extractor used by :meth:`profile`.
    clock:
        Monotonic clock forwarded to the default extractor.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        embedder: Optional[StateEmbedder] = None,
        oracle: Optional[CoherenceOracle] = None,
        extractor: Optional[FeatureExtractor] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.config = config or EngineConfig()
        cfg = self.config
        self.embedder = embedder or HarmonicEmbedder(cfg.hilbert_dim)
        self.oracle = oracle or KuramotoCoherenceOracle(cfg.hilbert_dim)
        self.extractor = extractor or FeatureExtractor(
            cfg.spectral_dim, cfg.spectral_bins, clock=clock
        )
        self.scorer = HybridScorer(
            cfg.classical_weight, cfg.quantum_weight, backend=cfg.scoring_backend
        )
        self.store = RegionStore.from_config(cfg, scorer=self.scorer)
        self.threshold = ThresholdController(
            cfg.initial_threshold,
            learning_rate=cfg.threshold_learning_rate,
            kappa=cfg.flood_gradient_kappa,
            target_rate=cfg.target_absorption_rate,
            tolerance=cfg.absorption_tolerance,
            window=cfg.absorption_window,
        )
        self.decisions = DecisionEngine()
        self.optimizer = Optimizer(
            self.store,
            self.oracle,
            instability_threshold=cfg.instability_threshold,
            stability_epsilon=cfg.stability_epsilon,
            merge_fidelity_threshold=cfg.merge_fidelity_threshold,
            max_iterations=cfg.max_optimization_iterations,
            dt=cfg.oracle_dt,
        )
        self._count_lock = threading.Lock()
        self._classification_count = 0

    # ------------------------------------------------------------------
    # hot path
    # ------------------------------------------------------------------
    def classify(self, circuit: CircuitMetadata) -> Decision:
        signature = self.extractor.classical_signature(circuit)
        state = self.embedder.embed(signature)
        result: Classification = self.store.classify(signature, state)

        with self._count_lock:
            self._classification_count += 1
            due = self._classification_count % self.config.optimization_interval == 0
        if due:
            self.optimize()

        return Decision(
            circuit_id=circuit.circuit_id,
            is_attack=result.is_attack,
            resonance=result.resonance,
            matched_region=result.region_index,
            attack_probability=result.attack_probability,
        )

    def process(self, circuit: CircuitMetadata) -> Verdict:
        """Classify ``circuit`` and decide whether to forward or absorb it.

        A circuit matching a region above the weak-match threshold scores
        ``resonance * (1 - attack_probability)``; anything else scores 1.0
        and is forwarded.
        """

        decision = self.classify(circuit)
        score = self.decision_score(decision)
        threshold = self.threshold.value()
        action = self.decisions.decide(score, threshold)
        self.threshold.record_absorption(action is CircuitAction.ABSORB)
        return Verdict(decision, action, score, threshold)

    def decision_score(self, decision: Decision) -> float:
        if (
            decision.matched_region is None
            or decision.attack_probability is None
            or decision.resonance <= self.config.weak_match_threshold
        ):
            return 1.0
        return float(decision.resonance * (1.0 - decision.attack_probability))

    def learn(self, circuit: CircuitMetadata, label: bool) -> LearnResult:
        signature = self.extractor.classical_signature(circuit)
        state = self.embedder.embed(signature)
        result = self.store.learn(signature, state, bool(label))
        self.oracle.evolve(self.config.oracle_dt)
        return result

    def profile(self, circuit: CircuitMetadata) -> CircuitProfile:
        return CircuitProfile(
            signature=self.extractor.create_signature(circuit),
            spectrum=self.extractor.spectral_fingerprint(circuit.cell_timings),
            timing_entropy=self.extractor.timing_entropy(circuit),
            classical=self.extractor.classical_signature(circuit),
        )

    # ------------------------------------------------------------------
    # maintenance
    # ------------------------------------------------------------------
    def update_threshold(self) -> ThresholdUpdate:
        coherence = self.store.global_coherence()
        flood_energy = 1.0 - self.threshold.absorption_rate()
        update = self.threshold.update(coherence, flood_energy)
        logger.debug(
            "threshold %.4f -> %.4f (coherence=%.3f, flood=%.3f)",
            update.previous,
            update.current,
            coherence,
            flood_energy,
        )
        return update

    def optimize(self) -> OptimizationReport:
        return self.optimizer.run()

    def reseed_oracle(self) -> bool:
        """Scatter the oracle's phases when its instability is at or below the
        optimizer trigger. Only oracles exposing ``randomize_phases`` are
        reseeded; returns whether a reseed happened.
        """

        randomize = getattr(self.oracle, "randomize_phases", None)
        if randomize is None:
            return False
        if float(self.oracle.instability()) > self.config.instability_threshold:
            return False
        randomize()
        logger.debug("coherence oracle settled, phases reseeded")
        return True

    def maintenance(self) -> MaintenanceReport:
        """Decay region strength, prune stale regions, then recalibrate.

        A settled oracle is reseeded before the optimizer pass.
        """

        factor = 1.0 - self.config.decay_rate_beta
        self.store.apply_decay(factor)
        pruned = 0
        if self.config.prune_strength_floor > 0.0:
            pruned = self.store.prune_stale(self.config.prune_strength_floor)
        threshold = self.update_threshold()
        reseeded = self.reseed_oracle()
        optimization = self.optimize()
        return MaintenanceReport(factor, pruned, threshold, optimization, reseeded)

    def stats(self) -> EngineStats:
        attack, benign = self.store.counts()
        decisions = self.decisions.statistics()
        with self._count_lock:
            classifications = self._classification_count
        floor = self.config.prune_strength_floor
        return EngineStats(
            total_regions=attack + benign,
            attack_regions=attack,
            benign_regions=benign,
            absorption_rate=self.threshold.absorption_rate(),
            total_decisions=decisions.total,
            forwarded=decisions.forwarded,
            absorbed=decisions.absorbed,
            threshold=self.threshold.value(),
            classification_count=classifications,
            instability=float(self.oracle.instability()),
            optimizer_runs=self.optimizer.runs,
            optimizer_failures=self.optimizer.failures,
            stale_regions=self.store.count_below(floor) if floor > 0.0 else 0,
        )

    def reset_statistics(self) -> None:
        self.decisions.reset()
        self.threshold.reset()
        self.optimizer.reset()
        with self._count_lock:
            self._classification_count = 0

    def reset_regions(self) -> None:
        self.store.clear()
        logger.info("cleared all learned regions")

    def save_regions(self, path: Union[str, Path]) -> int:
        count = save_regions(self.store, path)
        logger.info("saved %d regions to %s", count, path)
        return count

    def load_regions(self, path: Union[str, Path]) -> int:
        count = load_regions(self.store, path)
        logger.info("loaded %d regions from %s", count, path)
        return count


__all__ = [
    "CircuitProfile",
    "ClassificationEngine",
    "Decision",
    "EngineStats",
    "MaintenanceReport",
    "Verdict",
]
