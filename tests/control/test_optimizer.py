import logging

import pytest

from fixtures.circuits import make_signature, make_state, tilted_state
from thronion.classifier import Region, RegionStore
from thronion.control import Optimizer
from thronion.quantum import StaticCoherenceOracle


class SettlingOracle:
    """Instability that falls by ``step`` on every evolve call."""

    def __init__(self, value: float, step: float) -> None:
        self.value = value
        self.step = step
        self.evolutions = 0

    def instability(self) -> float:
        return self.value

    def evolve(self, dt: float) -> None:
        self.evolutions += 1
        self.value = max(0.0, self.value - self.step)


def _store_with_twins() -> RegionStore:
    store = RegionStore()
    store.restore(
        [
            Region(make_signature(), make_state(1.0), 0.1, sample_count=1, attack_probability=1.0),
            Region(make_signature(), tilted_state(0.95), 0.1, sample_count=1, attack_probability=0.0),
        ]
    )
    return store


def test_stable_oracle_skips_optimisation():
    store = _store_with_twins()
    optimizer = Optimizer(store, StaticCoherenceOracle(0.05))

    report = optimizer.run()
    assert report.triggered is False
    assert report.iterations == 0
    assert len(store) == 2
    assert optimizer.runs == 0


def test_instability_triggers_merge_and_settling():
    store = _store_with_twins()
    oracle = SettlingOracle(0.5, 0.2)
    optimizer = Optimizer(store, oracle)

    report = optimizer.run()

    assert report.triggered and report.converged
    assert report.merged == 1
    assert report.iterations == 3
    assert report.instability_before == pytest.approx(0.5)
    assert report.instability_after < 0.05
    assert len(store) == 1
    assert store.region(0).attack_probability == pytest.approx(0.5)
    assert optimizer.runs == 1 and optimizer.failures == 0


def test_loop_is_bounded_when_oracle_never_settles(caplog):
    oracle = SettlingOracle(0.9, 0.0)
    optimizer = Optimizer(_store_with_twins(), oracle, max_iterations=10)

    with caplog.at_level(logging.WARNING, logger="thronion.control.optimizer"):
        report = optimizer.run()

    assert report.triggered and not report.converged
    assert report.iterations == 10
    assert oracle.evolutions == 10
    assert optimizer.failures == 1
    assert "did not converge" in caplog.text


def test_reset_clears_counters():
    optimizer = Optimizer(_store_with_twins(), SettlingOracle(0.9, 0.0), max_iterations=1)
    optimizer.run()
    optimizer.reset()

    assert optimizer.runs == 0 and optimizer.failures == 0


@pytest.mark.parametrize("max_iterations", [0, 11])
def test_iteration_budget_is_capped(max_iterations):
    with pytest.raises(ValueError):
        Optimizer(RegionStore(), StaticCoherenceOracle(), max_iterations=max_iterations)
