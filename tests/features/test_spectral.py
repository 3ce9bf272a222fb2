import math

import numpy as np
import pytest

from fixtures.circuits import steady_circuit
from thronion.circuits import CircuitMetadata
from thronion.features import FeatureExtractor


def test_fingerprint_pads_to_power_of_two():
    spectrum = FeatureExtractor().spectral_fingerprint([1.0, 1.0, 1.0])

    assert len(spectrum) == 4
    assert spectrum.frequencies == pytest.approx((0.0, 0.25, 0.5, 0.75))
    assert spectrum.amplitudes == pytest.approx((3.0, 1.0, 1.0, 1.0))
    assert spectrum.dominant_frequency() == 0.0
    assert spectrum.energy() == pytest.approx(12.0)


def test_fingerprint_of_empty_timings_is_neutral():
    spectrum = FeatureExtractor().spectral_fingerprint([])

    assert spectrum.frequencies == (0.0,)
    assert spectrum.amplitudes == (0.0,)


def test_signature_is_unit_length_128(benign_sample, attack_sample):
    extractor = FeatureExtractor()

    for circuit in (benign_sample, attack_sample, steady_circuit()):
        signature = extractor.create_signature(circuit)
        assert signature.shape == (128,)
        assert np.linalg.norm(signature) == pytest.approx(1.0, abs=1e-6)


def test_signature_of_empty_circuit_is_all_zero():
    signature = FeatureExtractor().create_signature(CircuitMetadata(1))

    assert signature.shape == (128,)
    assert not np.any(signature)


def test_signature_of_overflowing_gaps_is_all_zero():
    circuit = CircuitMetadata(1, cell_timings=(1e300, 0.01), created_at=0.0)

    signature = FeatureExtractor(clock=lambda: 1.0).create_signature(circuit)
    assert signature.shape == (128,)
    assert not signature.any()


def test_statistical_features_use_injected_clock():
    extractor = FeatureExtractor(clock=lambda: 10.0)

    features = extractor.statistical_features(steady_circuit())
    assert features == pytest.approx([0.002, 0.0, 0.002, 0.002, 0.0, 0.0, 10.0, 409.6])


def test_timing_entropy_bounds():
    extractor = FeatureExtractor()
    spread = CircuitMetadata(1, cell_timings=[float(value) for value in range(10)])

    assert extractor.timing_entropy(spread) == pytest.approx(math.log2(10))
    assert extractor.timing_entropy(steady_circuit()) == pytest.approx(0.0)
    assert extractor.timing_entropy(CircuitMetadata(2)) == 0.0


def test_extractor_rejects_undersized_signature():
    with pytest.raises(ValueError):
        FeatureExtractor(spectral_dim=100, spectral_bins=120)
