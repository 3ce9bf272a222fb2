"""State-space collaborators: embedding, unit-norm states and coherence oracles."""

from .coherence import CoherenceOracle, KuramotoCoherenceOracle, StaticCoherenceOracle
from .embedding import HarmonicEmbedder, StateEmbedder
from .state import HILBERT_DIM, QuantumState, fidelity

__all__ = [
    "CoherenceOracle",
    "HILBERT_DIM",
    "HarmonicEmbedder",
    "KuramotoCoherenceOracle",
    "QuantumState",
    "StateEmbedder",
    "StaticCoherenceOracle",
    "fidelity",
]
