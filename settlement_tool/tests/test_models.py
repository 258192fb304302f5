"""
Tests for data models.
"""
import math

from settlement_tool.config.models import (
    CoordRow,
    CycleSegment,
    CycleState,
    CycleStateKind,
    MeasurementRow,
    ProjectData,
    ValidationResult
)


def test_raw_text_never_none():
    row = MeasurementRow(id="1", mark_raw=None, settl_raw=None, total_raw=None)
    assert row.mark_raw == ""
    assert row.settl_raw == ""
    assert row.total_raw == ""


def test_display_formats():
    row = MeasurementRow(id="1", mark=101.23456, settl=-1.26, total=-3.04)
    assert row.mark_display == "101.235"
    assert row.settl_display == "-1.3"
    assert row.total_display == "-3.0"


def test_display_falls_back_to_raw():
    row = MeasurementRow(id="1", mark_raw="нет доступа")
    assert row.mark_display == "нет доступа"
    assert row.total_display == ""


def test_available_for_calculations():
    assert MeasurementRow(id="1", total=-1.0).is_available_for_calculations()
    assert not MeasurementRow(id="2", total=-1.0, mark_raw="Нет доступа").is_available_for_calculations()
    assert not MeasurementRow(id="3", mark_raw="уничтожена").is_available_for_calculations()
    assert MeasurementRow(id="4", total=0.0, settl_raw="нов").is_available_for_calculations()


def test_coord_row_validity():
    assert CoordRow(1.0, 2.0).is_valid
    assert not CoordRow().is_valid
    assert math.isnan(CoordRow(id="7").x)


def test_cycle_state_has_data():
    assert CycleState(1, CycleStateKind.MEASURED).has_data
    assert not CycleState(1, CycleStateKind.MISSING).has_data


def test_segment_end_index():
    segment = CycleSegment(2, 3, 3, 5, CycleStateKind.MEASURED)
    assert segment.end_index == 4


def test_validation_result():
    result = ValidationResult(is_valid=True)
    result.add_warning("minor")
    assert result.is_valid
    result.add_error("broken")
    assert not result.is_valid
    assert result.errors == ["broken"]


def test_project_rows_index():
    project = ProjectData(max_nomen=30.0, rel_calculated=0.002)
    project.set_rows(1, 2, [MeasurementRow(id="A", total=-1.0, cycle=2)])
    assert [r.id for r in project.get_rows(1, 2)] == ["A"]
    assert project.get_rows(2, 2) == []
    assert project.limits.max_nomen == 30.0
    assert project.limits.rel_nomen is None

    df = project.rows_to_dataframe()
    assert list(df.columns) == ['object', 'cycle', 'id', 'mark', 'settl', 'total']
    assert df.iloc[0]['id'] == "A"
