import numpy as np
import pytest

from fixtures.circuits import make_signature, make_state
from thronion.classifier import HybridScorer, Region, euclidean
from thronion.errors import DimensionMismatchError
from thronion.quantum import QuantumState


def _regions():
    rng = np.random.default_rng(42)
    regions = []
    for index in range(6):
        state = QuantumState(rng.normal(size=13) + 1j * rng.normal(size=13))
        signature = make_signature(mean_ms=float(index * 5), std_ms=float(index), data=index / 6.0)
        regions.append(Region.seed(signature, state, index % 2 == 0, 0.1))
    return regions


def test_resonance_with_own_centers_is_one():
    region = _regions()[0]
    scorer = HybridScorer()

    score = scorer.resonance(region, region.classical_center, region.quantum_center)
    assert score == pytest.approx(1.0)


def test_resonance_orders_near_above_far():
    scorer = HybridScorer()
    region = Region.seed(make_signature(mean_ms=1.0), make_state(1.0), False, 0.1)
    far_signature = make_signature(mean_ms=500.0, std_ms=200.0, data=0.0)
    far_state = make_state(0.0, 0.0, 0.0, 1.0)

    near = scorer.resonance(region, region.classical_center, region.quantum_center)
    far = scorer.resonance(region, far_signature, far_state)
    assert near >= far
    assert 0.0 <= far <= 1.0


def test_score_all_matches_single_resonance():
    scorer = HybridScorer()
    regions = _regions()
    signature = make_signature(mean_ms=7.0, std_ms=1.5, data=0.4)
    state = make_state(0.3, 0.4j, 0.5)

    batch = scorer.score_all(regions, signature, state)
    expected = [scorer.resonance(region, signature, state) for region in regions]
    np.testing.assert_allclose(batch, expected, atol=1e-12)


def test_torch_backend_matches_numpy():
    regions = _regions()
    signature = make_signature(mean_ms=11.0, std_ms=2.0, data=0.9)
    state = make_state(0.1, 0.2, 0.3j, 0.4)

    numpy_scores = HybridScorer(backend="numpy").score_all(regions, signature, state)
    torch_scores = HybridScorer(backend="torch").score_all(regions, signature, state)
    np.testing.assert_allclose(torch_scores, numpy_scores, atol=1e-10)


def test_score_all_on_no_regions():
    scores = HybridScorer().score_all([], make_signature(), make_state(1.0))
    assert scores.shape == (0,)


def test_state_dimension_mismatch_raises():
    regions = _regions()
    with pytest.raises(DimensionMismatchError):
        HybridScorer().score_all(regions, make_signature(), make_state(1.0, dim=5))


def test_euclidean_requires_matching_shapes():
    assert euclidean(np.array([0.0, 3.0]), np.array([4.0, 0.0])) == pytest.approx(5.0)
    with pytest.raises(DimensionMismatchError):
        euclidean(np.zeros(2), np.zeros(3))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"classical_weight": 0.5, "quantum_weight": 0.6},
        {"classical_weight": -0.1, "quantum_weight": 1.1},
        {"backend": "jax"},
    ],
)
def test_invalid_scorer_configuration(kwargs):
    with pytest.raises(ValueError):
        HybridScorer(**kwargs)
