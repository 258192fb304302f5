"""
Tests for report exporters.
"""
import pandas as pd

from settlement_tool.config.models import CoordRow, MeasurementRow
from settlement_tool.engine import build_dynamics, build_general_report, build_relative_report
from settlement_tool.exporters import (
    ReportTextExporter,
    export_dynamics_csv,
    export_relative_csv
)


def sample_reports():
    rows = [
        MeasurementRow(id="1", total=0.0, settl=0.0),
        MeasurementRow(id="2", total=-5.0, settl=-1.0, mark_raw=""),
        MeasurementRow(id="3", settl_raw="нов", total=0.0),
    ]
    coords = [CoordRow(0.0, 0.0), CoordRow(3.0, 4.0), CoordRow()]
    return build_general_report(rows, 4.0), build_relative_report(coords, rows)


def test_text_summary(tmp_path):
    general, relative = sample_reports()
    path = tmp_path / "summary.txt"
    ReportTextExporter().export(str(path), general, relative, "Цикл 3 от 01.03.2024")

    text = path.read_text(encoding="utf-8")
    assert "Цикл 3 от 01.03.2024" in text
    assert "GENERAL REPORT" in text
    assert "RELATIVE REPORT" in text
    assert "-5.00" in text
    assert "1-2" in text
    assert "<" not in text


def test_text_summary_without_relative(tmp_path):
    general, _ = sample_reports()
    path = tmp_path / "summary.txt"
    ReportTextExporter().export(str(path), general)
    assert "RELATIVE REPORT" not in path.read_text(encoding="utf-8")


def test_relative_csv(tmp_path):
    _, relative = sample_reports()
    path = tmp_path / "pairs.csv"
    export_relative_csv(str(path), relative)

    df = pd.read_csv(path)
    assert list(df.columns) == ['Id1', 'Id2', 'Distance', 'DeltaTotal', 'Ratio']
    assert len(df) == 3
    assert df.iloc[0]['Distance'] == 5.0


def test_dynamics_csv(tmp_path):
    cycles = {
        1: [MeasurementRow(id="A", total=0.0)],
        2: [MeasurementRow(id="A", total=-1.0), MeasurementRow(id="B", total=-0.5)],
    }
    path = tmp_path / "dynamics.csv"
    export_dynamics_csv(str(path), build_dynamics(cycles))

    df = pd.read_csv(path, index_col='Cycle')
    assert list(df.columns) == ["A", "B"]
    assert df.loc[2, "B"] == -0.5
