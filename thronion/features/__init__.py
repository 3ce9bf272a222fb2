"""Feature extraction from raw circuit observations."""

from .metadata import (
    CellTypeDistribution,
    ClassicalSignature,
    TimingFeatures,
    analyze_cell_types,
    extract_timing_features,
)
from .spectral import FeatureExtractor, Spectrum

__all__ = [
    "CellTypeDistribution",
    "ClassicalSignature",
    "FeatureExtractor",
    "Spectrum",
    "TimingFeatures",
    "analyze_cell_types",
    "extract_timing_features",
]
