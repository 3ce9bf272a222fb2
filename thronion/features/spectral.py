"""Spectral and statistical feature extraction for circuit timing data."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np

from thronion.circuits.models import CircuitMetadata
from thronion.features.metadata import ClassicalSignature

STATISTICAL_FEATURE_COUNT = 8
ENTROPY_BINS = 10


@dataclass(frozen=True)
class Spectrum:
    """FFT magnitudes paired with normalised frequencies (cycles per sample)."""

    frequencies: tuple[float, ...]
    amplitudes: tuple[float, ...]

    def dominant_frequency(self) -> float:
        if not self.amplitudes:
            return 0.0
        return self.frequencies[int(np.argmax(self.amplitudes))]

    def energy(self) -> float:
        return float(sum(value * value for value in self.amplitudes))

    def __len__(self) -> int:
        return len(self.amplitudes)


def _next_power_of_two(length: int) -> int:
    return 1 << max(0, int(length) - 1).bit_length()


class FeatureExtractor:
    """Turn raw circuit observations into fixed-size signatures.

    Parameters
    ----------
    spectral_dim:
        Length of the signature returned by :meth:`create_signature`.
    spectral_bins:
        Number of leading FFT magnitude bins copied into the signature.
    clock:
        Monotonic time source used to derive the circuit age; injectable so
        tests can pin the elapsed time.
    """

    def __init__(
        self,
        spectral_dim: int = 128,
        spectral_bins: int = 120,
        *,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if spectral_bins <= 0:
            raise ValueError("spectral_bins must be positive")
        if spectral_dim < spectral_bins + STATISTICAL_FEATURE_COUNT:
            raise ValueError("spectral_dim must hold the spectral bins and statistical features")
        self.spectral_dim = int(spectral_dim)
        self.spectral_bins = int(spectral_bins)
        self._clock = clock or time.monotonic

    def spectral_fingerprint(self, timings: Sequence[float]) -> Spectrum:
        """Magnitude spectrum of the gaps, zero-padded to a power-of-two length."""

        if len(timings) == 0:
            return Spectrum(frequencies=(0.0,), amplitudes=(0.0,))
        padded_len = _next_power_of_two(len(timings))
        buffer = np.zeros(padded_len, dtype=np.float64)
        buffer[: len(timings)] = np.asarray(timings, dtype=np.float64)
        magnitudes = np.abs(np.fft.fft(buffer))
        frequencies = np.arange(padded_len, dtype=np.float64) / float(padded_len)
        return Spectrum(
            frequencies=tuple(float(value) for value in frequencies),
            amplitudes=tuple(float(value) for value in magnitudes),
        )

    def statistical_features(self, circuit: CircuitMetadata) -> List[float]:
        """Return ``[mean, std, min, max, iqr, variance, age, bytes_per_sec]``."""

        if not circuit.cell_timings:
            return [0.0] * STATISTICAL_FEATURE_COUNT

        timings = np.asarray(circuit.cell_timings, dtype=np.float64)
        mean = float(timings.mean())
        variance = float(timings.var())
        ordered = np.sort(timings)
        q1 = float(ordered[len(ordered) // 4])
        q3 = float(ordered[(3 * len(ordered)) // 4])
        duration = circuit.age(self._clock())
        bytes_per_sec = circuit.total_bytes / max(duration, 1.0)
        return [
            mean,
            math.sqrt(variance),
            float(ordered[0]),
            float(ordered[-1]),
            q3 - q1,
            variance,
            duration,
            bytes_per_sec,
        ]

    def create_signature(self, circuit: CircuitMetadata) -> np.ndarray:
        """Fixed-length, L2-normalised spectral + statistical signature.

        An all-zero vector is returned as-is rather than divided by zero, and
        timings whose statistics overflow produce the all-zero vector.
        """

        signature = np.zeros(self.spectral_dim, dtype=np.float64)
        with np.errstate(over="ignore", invalid="ignore"):
            spectrum = self.spectral_fingerprint(circuit.cell_timings)
            bins = np.asarray(spectrum.amplitudes[: self.spectral_bins], dtype=np.float64)
            signature[: bins.size] = bins
            features = np.asarray(self.statistical_features(circuit), dtype=np.float64)
            signature[bins.size : bins.size + features.size] = features
            norm = float(np.linalg.norm(signature))

        if not math.isfinite(norm):
            return np.zeros(self.spectral_dim, dtype=np.float64)
        if norm > 0.0:
            signature /= norm
        return signature

    def timing_entropy(self, circuit: CircuitMetadata) -> float:
        """Shannon entropy (bits) of a 10-bin histogram of the timing gaps."""

        if not circuit.cell_timings:
            return 0.0
        timings = np.asarray(circuit.cell_timings, dtype=np.float64)
        low = float(timings.min())
        span = max(float(timings.max()) - low, 1e-10)
        bins = np.floor((timings - low) / span * (ENTROPY_BINS - 0.01)).astype(int)
        counts = np.bincount(np.clip(bins, 0, ENTROPY_BINS - 1), minlength=ENTROPY_BINS)
        probabilities = counts[counts > 0] / float(timings.size)
        return float(-(probabilities * np.log2(probabilities)).sum())

    def classical_signature(self, circuit: CircuitMetadata) -> ClassicalSignature:
        return ClassicalSignature.from_circuit(circuit)


__all__ = ["ENTROPY_BINS", "FeatureExtractor", "STATISTICAL_FEATURE_COUNT", "Spectrum"]
