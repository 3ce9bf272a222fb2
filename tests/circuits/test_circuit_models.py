import pytest

from thronion.circuits import CellType, CircuitMetadata


def test_cell_type_parse_is_case_insensitive():
    assert CellType.parse("INTRODUCE2") is CellType.INTRODUCE2
    assert CellType.parse("Rendezvous_1") is CellType.RENDEZVOUS1
    assert CellType.parse(CellType.DATA) is CellType.DATA


def test_unknown_cell_tags_map_to_other():
    assert CellType.parse("extend2") is CellType.OTHER


def test_metadata_parses_string_tags():
    circuit = CircuitMetadata(1, cell_timings=[0.1, 0.2], cell_types=["data", "padding"], total_bytes=10)

    assert circuit.cell_types == (CellType.DATA, CellType.PADDING)
    assert circuit.cell_timings == (0.1, 0.2)
    assert circuit.cell_count == 2


def test_negative_timings_are_rejected():
    with pytest.raises(ValueError):
        CircuitMetadata(1, cell_timings=(0.1, -0.2))


@pytest.mark.parametrize("gap", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_timings_are_rejected(gap):
    with pytest.raises(ValueError, match="finite"):
        CircuitMetadata(1, cell_timings=(0.1, gap))


def test_negative_byte_count_is_rejected():
    with pytest.raises(ValueError):
        CircuitMetadata(1, total_bytes=-1)


def test_age_is_never_negative():
    circuit = CircuitMetadata(1, created_at=10.0)

    assert circuit.age(now=12.5) == pytest.approx(2.5)
    assert circuit.age(now=5.0) == 0.0


def test_as_dict_serialises_cell_types():
    circuit = CircuitMetadata(7, cell_timings=(0.5,), cell_types=("introduce2",), created_at=1.0)

    payload = circuit.as_dict()
    assert payload["circuit_id"] == 7
    assert payload["cell_types"] == ["introduce2"]
    assert payload["rendezvous_completed"] is False
