import pytest

from thronion.control import ThresholdController


def test_update_follows_gradient():
    controller = ThresholdController(0.5, learning_rate=0.1, kappa=0.2)

    update = controller.update(coherence=1.0, flood_energy=0.0)
    assert update.gradient == pytest.approx(-1.0)
    assert controller.value() == pytest.approx(0.6)

    controller.update(coherence=0.0, flood_energy=1.0)
    assert controller.value() == pytest.approx(0.58)


def test_threshold_is_clamped():
    controller = ThresholdController(0.5, learning_rate=1.0)

    controller.update(coherence=1.0, flood_energy=0.0)
    assert controller.value() == 1.0
    controller.update(coherence=0.0, flood_energy=10.0)
    assert controller.value() == 0.0


def test_absorption_window_drops_oldest():
    controller = ThresholdController(window=3)

    for absorbed in (True, True, False, False):
        controller.record_absorption(absorbed)

    assert controller.observations() == 3
    assert controller.absorption_rate() == pytest.approx(1.0 / 3.0)


def test_absorption_rate_stays_in_unit_interval():
    controller = ThresholdController(window=5)
    assert controller.absorption_rate() == 0.0

    for index in range(40):
        controller.record_absorption(index % 3 != 0)
        assert 0.0 <= controller.absorption_rate() <= 1.0


def test_convergence_against_target():
    controller = ThresholdController(target_rate=0.5, tolerance=0.05, window=4)
    for absorbed in (True, False, True, False):
        controller.record_absorption(absorbed)
    assert controller.has_converged()

    controller.record_absorption(True)
    controller.record_absorption(True)
    assert controller.absorption_rate() == pytest.approx(0.75)
    assert not controller.has_converged()


def test_reset_restores_initial_state():
    controller = ThresholdController(0.3, learning_rate=0.5)
    controller.update(1.0, 0.0)
    controller.record_absorption(True)

    controller.reset()
    assert controller.value() == 0.3
    assert controller.absorption_rate() == 0.0


@pytest.mark.parametrize(
    "kwargs",
    [{"initial": 1.5}, {"learning_rate": -0.1}, {"window": 0}, {"tolerance": 0.0}],
)
def test_invalid_parameters(kwargs):
    with pytest.raises(ValueError):
        ThresholdController(**kwargs)
