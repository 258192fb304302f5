"""
Tests for cell, clipboard and table parsing.
"""
import math

import pandas as pd
import pytest

from settlement_tool.engine.errors import ImportFormatError, UnsupportedClipboardFormatError
from settlement_tool.engine.units import Unit
from settlement_tool.parsers import (
    ClipboardDataType,
    ClipboardParser,
    looks_like_header,
    parse_cell,
    parse_clipboard,
    parse_number,
    read_coordinates_csv,
    read_measurements_csv,
    rows_from_dataframe
)


def test_parse_number_accepts_comma():
    assert parse_number("-1,5") == -1.5
    assert parse_number(" 2.25 ") == 2.25
    assert parse_number("abc") is None
    assert parse_number("") is None
    assert parse_number("nan") is None


def test_parse_cell():
    assert parse_cell("  -1,5 ") == (-1.5, "-1,5")
    assert parse_cell("Новая") == (0.0, "Новая")
    assert parse_cell("нет доступа") == (None, "нет доступа")
    assert parse_cell(None) == (None, "")


def test_looks_like_header():
    assert looks_like_header(["№", "1", "2"])
    assert looks_like_header(["Отметка", "Осадка", "Суммарная"])
    assert looks_like_header(["a", "b", "1"])
    assert not looks_like_header(["1", "2", "3"])
    assert not looks_like_header(["100", "нов", "нов"])


def test_clipboard_ids():
    result = parse_clipboard("1\r\n2\n\n 3 \n", 1)
    assert result.data_type is ClipboardDataType.IDS
    assert result.ids == ["1", "2", "3"]


def test_clipboard_coordinates_converted_to_mm():
    result = parse_clipboard("1.5\t2,5\nx\ty\n", 1, coord_unit=Unit.METER)
    assert result.data_type is ClipboardDataType.COORDINATES
    assert len(result.coordinates) == 1
    assert result.coordinates[0].x == pytest.approx(1500.0)
    assert result.coordinates[0].y == pytest.approx(2500.0)


def test_clipboard_three_columns_use_existing_ids():
    text = "Отметка\tОсадка\tСуммарная\n101,234\t-1,2\t-3,4\n100\tнов\tнов\n"
    result = ClipboardParser().parse(text, cycle_number=4, existing_ids=["A"])

    assert result.data_type is ClipboardDataType.MEASUREMENTS3
    assert [r.id for r in result.measurements] == ["A", "2"]
    first, second = result.measurements
    assert first.mark == pytest.approx(101.234)
    assert first.total == pytest.approx(-3.4)
    assert first.cycle == 4
    assert second.settl == 0.0
    assert second.settl_raw == "нов"


def test_clipboard_four_columns():
    text = "101\t-1\t-2\tR1\n100\t0\t0\t \n"
    result = parse_clipboard(text, 2)
    assert result.data_type is ClipboardDataType.MEASUREMENTS4
    assert [r.id for r in result.measurements] == ["R1"]
    assert result.measurements[0].total == -2.0


def test_clipboard_unsupported_layout():
    with pytest.raises(UnsupportedClipboardFormatError):
        parse_clipboard("1\t2\t3\t4\t5", 1)


def test_clipboard_blank_text():
    result = parse_clipboard("  \n", 1)
    assert result.data_type is ClipboardDataType.NONE
    assert result.measurements == []


def test_read_measurements_csv(tmp_path):
    path = tmp_path / "rows.csv"
    path.write_text(
        "object,cycle,id,mark,settl,total\n"
        "1,1,A,100.000,0,0\n"
        "1,2,A,99.998,-2,-2\n"
        "1,2,B,нет доступа,,\n"
        "2,1,C,50,0,0\n",
        encoding="utf-8",
    )
    objects = read_measurements_csv(str(path))

    assert sorted(objects) == [1, 2]
    assert sorted(objects[1]) == [1, 2]
    a, b = objects[1][2]
    assert a.total == -2.0
    assert a.cycle == 2
    assert b.mark is None and b.mark_raw == "нет доступа"
    assert b.settl is None and b.settl_raw == ""
    assert objects[2][1][0].id == "C"


def test_rows_from_numeric_dataframe():
    df = pd.DataFrame({
        "Cycle": [1], "ID": [5], "Mark": [1.0], "Settl": [float("nan")], "Total": [-1.0],
    })
    objects = rows_from_dataframe(df, default_object=3)
    row = objects[3][1][0]
    assert row.id == "5"
    assert row.total == -1.0
    assert row.settl is None


def test_missing_columns():
    with pytest.raises(ImportFormatError):
        rows_from_dataframe(pd.DataFrame({"id": ["A"], "total": [1.0]}))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_measurements_csv(str(tmp_path / "absent.csv"))


def test_read_coordinates_csv(tmp_path):
    path = tmp_path / "coords.csv"
    path.write_text("id,x,y\nA,1.5,2\nB,,3\n", encoding="utf-8")
    coords = read_coordinates_csv(str(path), Unit.METER)

    assert [c.id for c in coords] == ["A", "B"]
    assert coords[0].x == pytest.approx(1500.0)
    assert coords[0].y == pytest.approx(2000.0)
    assert math.isnan(coords[1].x)
    assert not coords[1].is_valid
