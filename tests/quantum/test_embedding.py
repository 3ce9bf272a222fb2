import numpy as np
import pytest

from fixtures.circuits import make_signature
from thronion.features import ClassicalSignature
from thronion.quantum import HarmonicEmbedder, QuantumState, StateEmbedder


def test_embedder_satisfies_protocol():
    assert isinstance(HarmonicEmbedder(), StateEmbedder)


def test_embeddings_have_unit_norm():
    embedder = HarmonicEmbedder()
    rng = np.random.default_rng(0)
    for _ in range(20):
        signature = ClassicalSignature(*rng.uniform(0.0, 5000.0, size=5))
        state = embedder.embed(signature)
        assert state.dim == 13
        assert state.norm() == pytest.approx(1.0, abs=1e-10)


def test_embedding_is_deterministic():
    embedder = HarmonicEmbedder()
    signature = make_signature(mean_ms=12.0, std_ms=3.0, data=0.7)

    assert embedder.embed(signature) == embedder.embed(signature)


def test_harmonic_fill():
    embedder = HarmonicEmbedder(dimension=7)
    signature = ClassicalSignature(mean_interval=1000.0)

    amplitudes = embedder.embed(signature).amplitudes.real
    expected = np.zeros(7)
    expected[0] = 1.0
    expected[5] = np.sin(5 * np.pi / 7)
    expected /= np.linalg.norm(expected)
    np.testing.assert_allclose(amplitudes, expected, atol=1e-12)


def test_zero_signature_embeds_to_ground_state():
    state = HarmonicEmbedder().embed(ClassicalSignature())

    assert state == QuantumState.basis(0)


def test_dimension_must_hold_the_features():
    with pytest.raises(ValueError):
        HarmonicEmbedder(dimension=4)


@pytest.mark.parametrize(
    "signature",
    [
        ClassicalSignature(mean_interval=1e-10, std_dev_interval=1e-10),
        ClassicalSignature(mean_interval=float("nan")),
        ClassicalSignature(std_dev_interval=float("inf")),
        ClassicalSignature(mean_interval=1e305, std_dev_interval=1e305),
    ],
    ids=["below-tolerance", "nan", "inf", "overflowing-norm"],
)
def test_unusable_features_embed_to_ground_state(signature):
    state = HarmonicEmbedder().embed(signature)

    assert state == QuantumState.basis(0)
