"""
Tests for dynamics series and cycle labels.
"""
import math

from settlement_tool.config.models import DynamicsPoint, MeasurementRow
from settlement_tool.engine.cycle_labels import cycle_caption, extract_date_tail
from settlement_tool.engine.dynamics import build_dynamics, series_to_dataframe


def test_series_per_id_in_first_seen_order():
    cycles = {
        2: [MeasurementRow(id="B", total=-1.5), MeasurementRow(id="A", total=-1.0)],
        1: [MeasurementRow(id="A", total=0.0), MeasurementRow(id="C", total=0.0)],
    }
    series = build_dynamics(cycles)
    assert [s.id for s in series] == ["B", "A", "C"]

    by_id = {s.id: s for s in series}
    assert by_id["A"].points == [DynamicsPoint(1, 0.0), DynamicsPoint(2, -1.0)]
    assert by_id["B"].points == [DynamicsPoint(2, -1.5)]


def test_none_totals_are_skipped():
    cycles = {
        1: [MeasurementRow(id="A", total=0.0)],
        2: [MeasurementRow(id="A", mark_raw="нет доступа")],
        3: [MeasurementRow(id="A", total=-2.0)],
    }
    series = build_dynamics(cycles)
    assert [p.cycle for p in series[0].points] == [1, 3]


def test_empty_dynamics():
    assert build_dynamics({}) == []


def test_series_dataframe_pivot():
    cycles = {
        1: [MeasurementRow(id="A", total=0.0)],
        2: [MeasurementRow(id="A", total=-1.0), MeasurementRow(id="B", total=-0.5)],
    }
    df = series_to_dataframe(build_dynamics(cycles))
    assert list(df.columns) == ["A", "B"]
    assert list(df.index) == [1, 2]
    assert df.index.name == "Cycle"
    assert df.loc[2, "A"] == -1.0
    assert math.isnan(df.loc[1, "B"])


def test_extract_date_tail():
    assert extract_date_tail("Цикл 3 от 12.05.2024") == "12.05.2024"
    assert extract_date_tail("12.05.2024  ") == "12.05.2024"
    assert extract_date_tail("   ") is None
    assert extract_date_tail(None) is None


def test_cycle_caption():
    labels = {1: "Цикл 1 от 01.02.2023", 2: " "}
    assert cycle_caption(1, labels) == "Цикл 1 от 01.02.2023"
    assert cycle_caption(2, labels) == "Цикл 2"
    assert cycle_caption(5, labels) == "Цикл 5"


def test_series_to_dataframe_method():
    cycles = {
        1: [MeasurementRow(id="A", total=0.0)],
        3: [MeasurementRow(id="A", total=-2.5)],
    }
    df = build_dynamics(cycles)[0].to_dataframe()
    assert list(df.columns) == ['Cycle', 'Total']
    assert list(df['Cycle']) == [1, 3]
    assert df.iloc[1]['Total'] == -2.5
