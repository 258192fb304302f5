"""
Tests for the general report.
"""
import math

from settlement_tool.config.models import MeasurementRow
from settlement_tool.engine.general_report import (
    GeneralReportBuilder,
    build_extremum_ids_string,
    build_extremum_value_string,
    build_general_report,
    exceeded,
    get_average,
    get_max,
    get_min
)


def make_row(point_id, total=None, settl=None, **raw):
    return MeasurementRow(id=point_id, total=total, settl=settl, **raw)


def test_tied_minimum_lists_every_id():
    rows = [make_row("A", -5.0), make_row("B", -5.0), make_row("C", -2.0)]
    report = build_general_report(rows)
    assert report.min_total.value == -5.0
    assert report.min_total.ids == ["A", "B"]
    assert report.max_total.ids == ["C"]


def test_extremum_is_rounded_after_tie_detection():
    rows = [make_row("A", -1.123456), make_row("B", -1.1234)]
    extremum = get_min(rows, lambda r: r.total)
    assert extremum.value == -1.1235
    assert extremum.ids == ["A"]


def test_average_rounded_to_four_decimals():
    rows = [make_row("A", 1.0), make_row("B", 2.0), make_row("C", 2.0)]
    assert get_average(rows, lambda r: r.total) == 1.6667
    assert get_average([], lambda r: r.total) is None


def test_rows_without_value_are_skipped():
    rows = [make_row("A", -2.0, settl=None), make_row("B", None, settl=-0.5)]
    report = build_general_report(rows)
    assert report.max_total.ids == ["A"]
    assert report.min_settl.ids == ["B"]
    assert report.avg_total == -2.0


def test_exceedance_is_one_sided():
    assert exceeded(-11.0, 10.0)
    assert not exceeded(11.0, 10.0)
    assert not exceeded(-10.0, 10.0)
    assert exceeded(-11.0, -10.0) is False


def test_disabled_limits_never_flag():
    for limit in (None, 0, -5.0, math.nan, math.inf):
        assert not exceeded(-1000.0, limit)

    rows = [make_row("A", -50.0)]
    report = build_general_report(rows, None, 0)
    assert report.exceed_total_sp_ids == []
    assert report.exceed_total_calc_ids == []


def test_report_exceedance_lists():
    rows = [make_row("1", -31.0), make_row("2", 31.0), make_row("3", -21.0)]
    report = build_general_report(rows, limit_sp=30.0, limit_calc=20.0)
    assert report.exceed_total_sp_ids == ["1"]
    assert report.exceed_total_calc_ids == ["1", "3"]


def test_signed_extrema_string():
    rows = [make_row("A", -3.2), make_row("B", 4.4), make_row("C", 0.0)]
    assert build_extremum_value_string(rows, lambda r: r.total) == "-3.20/+4.40"
    assert build_extremum_ids_string(rows, lambda r: r.total) == "A / B"


def test_signed_extrema_one_sign_and_zeros():
    negatives = [make_row("A", -1.0), make_row("B", -3.004), make_row("C", -3.0)]
    assert build_extremum_value_string(negatives, lambda r: r.total) == "-3.00"
    assert build_extremum_ids_string(negatives, lambda r: r.total) == "B, C"

    zeros = [make_row("A", 0.0), make_row("B", 0.001)]
    assert build_extremum_value_string(zeros, lambda r: r.total) == "-"
    assert build_extremum_ids_string(zeros, lambda r: r.total) == "-"


def test_status_lists():
    rows = [
        make_row("1", mark_raw="нет доступа"),
        make_row("2", total=0.0, settl_raw="нов"),
        make_row("3", mark_raw="Уничтожена"),
        make_row("4", total=-1.0),
    ]
    report = build_general_report(rows)
    assert report.no_access_ids == ["1"]
    assert report.new_ids == ["2"]
    assert report.destroyed_ids == ["3"]


def test_empty_input_degrades():
    report = build_general_report([])
    assert math.isnan(report.max_total.value)
    assert report.max_total.ids == []
    assert report.avg_total is None
    assert report.avg_settl is None
    assert report.total_extrema == "-"
    assert report.settl_extrema_ids == "-"
    assert report.no_access_ids == []


def test_build_is_idempotent():
    rows = [make_row("A", -3.2, settl=-0.4), make_row("B", 4.4, settl=0.1)]
    builder = GeneralReportBuilder()
    assert builder.build(rows, 3.0, None) == builder.build(rows, 3.0, None)
    assert builder.build([], None, None) == builder.build([], None, None)


def test_max_helper_matches_report():
    rows = [make_row("A", 2.5), make_row("B", 1.0)]
    assert get_max(rows, lambda r: r.total).ids == ["A"]
