"""
General Report Module

Aggregate statistics of absolute settlement for one (object, cycle):
extrema with every attaining mark, averages, signed dual extrema strings,
status lists and exceedances against two configurable limits.
"""
from typing import Callable, Iterable, List, Optional, Sequence, Tuple
import logging
import math

import numpy as np

from ..config.models import Extremum, GeneralReportData, MeasurementRow
from ..config.settings import get_settings


logger = logging.getLogger(__name__)

Selector = Callable[[MeasurementRow], Optional[float]]


def _has_value(value: Optional[float]) -> bool:
    return value is not None and not math.isnan(value)


def get_max(rows: Sequence[MeasurementRow], selector: Selector) -> Extremum:
    """
    Maximum of a field with all ids attaining it.

    Ties are found by comparing raw values against the raw maximum within
    the tie tolerance; only the reported value is rounded.
    """
    return _get_extremum(rows, selector, max)


def get_min(rows: Sequence[MeasurementRow], selector: Selector) -> Extremum:
    """Minimum of a field with all ids attaining it."""
    return _get_extremum(rows, selector, min)


def _get_extremum(rows: Sequence[MeasurementRow], selector: Selector, pick) -> Extremum:
    if not rows:
        return Extremum(math.nan, [])
    precision = get_settings().precision
    extreme = pick(selector(r) for r in rows)
    ids = [r.id for r in rows if abs(selector(r) - extreme) < precision.tie_tolerance]
    return Extremum(round(extreme, precision.extremum_decimals), ids)


def get_average(rows: Sequence[MeasurementRow], selector: Selector) -> Optional[float]:
    """Rounded arithmetic mean, None for no rows."""
    if not rows:
        return None
    mean = float(np.mean([selector(r) for r in rows]))
    return round(mean, get_settings().precision.extremum_decimals)


def format_signed(value: float, decimals: int = 2) -> str:
    """Format with an explicit sign, e.g. '+1.10' or '-3.20'."""
    return f"{value:+.{decimals}f}"


def join_ids_or_dash(ids: Iterable[str]) -> str:
    """Comma-join non-blank ids, '-' if none."""
    kept = [i for i in ids if i and i.strip()]
    return ", ".join(kept) if kept else "-"


def _rounded_values(rows: Sequence[MeasurementRow], selector: Selector,
                    decimals: int) -> List[Tuple[str, float]]:
    data = []
    for row in rows:
        value = selector(row)
        if _has_value(value):
            data.append((row.id, round(value, decimals)))
    return data


def build_extremum_value_string(rows: Sequence[MeasurementRow], selector: Selector,
                                decimals: int = 2) -> str:
    """
    Worst settlement and worst heave as one string.

    Values are rounded first, then split by sign (zeros belong to neither):
        both signs  -> '-3.20/+4.40'
        one sign    -> '-3.20' or '+4.40'
        none        -> '-'
    """
    values = [v for _, v in _rounded_values(rows, selector, decimals)]
    negatives = [v for v in values if v < 0]
    positives = [v for v in values if v > 0]

    if negatives and positives:
        return f"{format_signed(min(negatives), decimals)}/{format_signed(max(positives), decimals)}"
    if negatives:
        return format_signed(min(negatives), decimals)
    if positives:
        return format_signed(max(positives), decimals)
    return "-"


def build_extremum_ids_string(rows: Sequence[MeasurementRow], selector: Selector,
                              decimals: int = 2) -> str:
    """Ids attaining the values of build_extremum_value_string, same layout."""
    data = _rounded_values(rows, selector, decimals)
    if not data:
        return "-"

    tolerance = get_settings().precision.tie_tolerance
    negatives = [(i, v) for i, v in data if v < 0]
    positives = [(i, v) for i, v in data if v > 0]

    def attaining(items, extreme):
        return [i for i, v in items if abs(v - extreme) < tolerance]

    neg_ids = attaining(negatives, min(v for _, v in negatives)) if negatives else None
    pos_ids = attaining(positives, max(v for _, v in positives)) if positives else None

    if neg_ids is not None and pos_ids is not None:
        return f"{join_ids_or_dash(neg_ids)} / {join_ids_or_dash(pos_ids)}"
    if neg_ids is not None:
        return join_ids_or_dash(neg_ids)
    if pos_ids is not None:
        return join_ids_or_dash(pos_ids)
    return "-"


def exceeded(value: float, limit: Optional[float]) -> bool:
    """
    Check a total settlement against a limit.

    Only settlement (negative values) beyond the limit magnitude counts;
    heave never exceeds. A missing, non-finite or non-positive limit is
    disabled.
    """
    if limit is None or not math.isfinite(limit) or limit <= 0:
        return False
    return value < -abs(limit)


def _contains(text: str, marker: str) -> bool:
    return marker.lower() in (text or "").lower()


class GeneralReportBuilder:
    """Builds GeneralReportData from the rows of one cycle."""

    def __init__(self):
        self.settings = get_settings()

    def build(
        self,
        rows: Iterable[MeasurementRow],
        limit_sp: Optional[float],
        limit_calc: Optional[float]
    ) -> GeneralReportData:
        """
        Build the general report.

        Args:
            rows: Measurement rows of one (object, cycle)
            limit_sp: Standards-based limit, mm (disabled if None/NaN/<=0)
            limit_calc: Calculated limit, mm (disabled if None/NaN/<=0)

        Returns:
            GeneralReportData; empty input degrades to NaN/None/'-'
        """
        rows = list(rows)
        total = [r for r in rows if _has_value(r.total)]
        settl = [r for r in rows if _has_value(r.settl)]

        def by_total(r):
            return r.total

        def by_settl(r):
            return r.settl

        markers = self.settings.markers
        decimals = self.settings.precision.signed_decimals

        no_access = [r.id for r in rows if _contains(r.mark_raw, markers.report_no_access)]
        new = [r.id for r in rows if _contains(r.settl_raw, markers.report_new)]
        destroyed = [r.id for r in rows if _contains(r.mark_raw, markers.report_destroyed)]

        exceed_sp = [r.id for r in total if exceeded(r.total, limit_sp)]
        exceed_calc = [r.id for r in total if exceeded(r.total, limit_calc)]

        report = GeneralReportData(
            max_total=get_max(total, by_total),
            min_total=get_min(total, by_total),
            avg_total=get_average(total, by_total),
            max_settl=get_max(settl, by_settl),
            min_settl=get_min(settl, by_settl),
            avg_settl=get_average(settl, by_settl),
            no_access_ids=no_access,
            new_ids=new,
            destroyed_ids=destroyed,
            exceed_total_sp_ids=exceed_sp,
            exceed_total_calc_ids=exceed_calc,
            total_extrema=build_extremum_value_string(total, by_total, decimals),
            settl_extrema=build_extremum_value_string(settl, by_settl, decimals),
            total_extrema_ids=build_extremum_ids_string(total, by_total, decimals),
            settl_extrema_ids=build_extremum_ids_string(settl, by_settl, decimals),
        )

        logger.debug(
            f"General report: {len(rows)} rows, {len(total)} with total, "
            f"{len(settl)} with settlement, {len(exceed_sp)}/{len(exceed_calc)} exceedances"
        )
        return report


def build_general_report(
    rows: Iterable[MeasurementRow],
    limit_sp: Optional[float] = None,
    limit_calc: Optional[float] = None
) -> GeneralReportData:
    """Convenience function to build a general report."""
    return GeneralReportBuilder().build(rows, limit_sp, limit_calc)
