"""
Tests for diagnostic validators.
"""
from settlement_tool.config.models import CoordRow, CycleState, CycleStateKind, MeasurementRow
from settlement_tool.validators import check_alignment, check_cycle_order, find_duplicate_ids


def test_aligned_inputs_pass():
    coords = [CoordRow(0.0, 0.0, "1"), CoordRow(1.0, 1.0, "2")]
    rows = [MeasurementRow(id="1"), MeasurementRow(id="2")]
    result = check_alignment(coords, rows)
    assert result.is_valid
    assert result.warnings == []


def test_alignment_warnings():
    coords = [CoordRow(0.0, 0.0, "2"), CoordRow(id="1")]
    rows = [MeasurementRow(id="1"), MeasurementRow(id="2"), MeasurementRow(id="3")]
    result = check_alignment(coords, rows)

    assert result.is_valid
    assert len(result.warnings) == 4
    assert "first 2 points" in result.warnings[0]


def test_cycle_order():
    ordered = [CycleState(1, CycleStateKind.MEASURED), CycleState(3, CycleStateKind.MISSING)]
    assert check_cycle_order(ordered).warnings == []

    unordered = [CycleState(2, CycleStateKind.MEASURED), CycleState(2, CycleStateKind.MEASURED)]
    assert len(check_cycle_order(unordered).warnings) == 1


def test_duplicate_ids():
    rows = [MeasurementRow(id="A"), MeasurementRow(id="a"), MeasurementRow(id="B"), MeasurementRow(id="A")]
    assert find_duplicate_ids(rows) == ["A"]
