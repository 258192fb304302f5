"""
Relative Report Module

Differential (relative) settlement between every pair of marks in one
cycle: planar distance, difference of total settlement, and their ratio.
"""
from typing import Iterable, List, Optional
import logging
import math
import warnings

import numpy as np

from ..config.models import CoordRow, Extremum, MeasurementRow, RelativeReport, RelativeRow
from ..config.settings import get_settings
from .errors import MisalignedInputWarning


logger = logging.getLogger(__name__)


def round_or_nan(value: float, digits: int) -> float:
    """Round finite values; anything else becomes NaN."""
    if value is None or not math.isfinite(value):
        return math.nan
    return round(value, digits)


def _total_or_nan(row: MeasurementRow) -> float:
    return math.nan if row.total is None else float(row.total)


def _exceeds(ratio: float, limit: Optional[float]) -> bool:
    # None disables the check; otherwise |ratio| must be strictly greater
    if limit is None:
        return False
    return abs(ratio) > limit


class RelativeReportBuilder:
    """
    Builds a RelativeReport from index-aligned coordinates and rows.

    Position i in both sequences must describe the same mark. Pairs are
    never matched by id.
    """

    def __init__(self):
        self.settings = get_settings()

    def build(
        self,
        coords: Iterable[CoordRow],
        rows: Iterable[MeasurementRow],
        limit_sp: Optional[float],
        limit_calc: Optional[float]
    ) -> RelativeReport:
        """
        Build the relative report.

        Every unordered pair (i, j), i < j, yields one row, even when its
        distance, delta or ratio is NaN.

        Args:
            coords: Coordinates in mm, aligned by position with rows
            rows: Measurement rows of one cycle
            limit_sp: Standards-based ratio limit (None disables)
            limit_calc: Calculated ratio limit (None disables)

        Returns:
            RelativeReport
        """
        coords = list(coords)
        rows = list(rows)
        if len(coords) != len(rows):
            warnings.warn(
                f"{len(coords)} coordinates vs {len(rows)} rows; pairing by position",
                MisalignedInputWarning,
                stacklevel=2,
            )

        n = min(len(coords), len(rows))
        precision = self.settings.precision
        all_rows = self._build_pairs(coords[:n], rows[:n])

        valid = [r for r in all_rows if math.isfinite(r.ratio)]
        exceeded_sp = [r for r in valid if _exceeds(r.ratio, limit_sp)]
        exceeded_calc = [r for r in valid if _exceeds(r.ratio, limit_calc)]

        if valid:
            max_abs = max(abs(r.ratio) for r in valid)
            ids = [r.label for r in valid
                   if abs(abs(r.ratio) - max_abs) < precision.tie_tolerance]
            max_relative = Extremum(round(max_abs, precision.ratio_decimals), ids)
        else:
            max_relative = Extremum(math.nan, [])

        logger.debug(
            f"Relative report: {n} points, {len(all_rows)} pairs, {len(valid)} with ratio, "
            f"max |ratio| {max_relative.value}"
        )
        return RelativeReport(
            all_rows=all_rows,
            exceeded_sp_rows=exceeded_sp,
            exceeded_calc_rows=exceeded_calc,
            max_relative=max_relative,
        )

    def _build_pairs(self, coords: List[CoordRow], rows: List[MeasurementRow]) -> List[RelativeRow]:
        """Compute distance, delta total and ratio for all pairs."""
        n = len(rows)
        if n < 2:
            return []

        precision = self.settings.precision
        xs = np.array([c.x for c in coords], dtype=float)
        ys = np.array([c.y for c in coords], dtype=float)
        totals = np.array([_total_or_nan(r) for r in rows], dtype=float)

        has_coord = np.isfinite(xs) & np.isfinite(ys)
        has_total = np.isfinite(totals)

        # Pairwise matrices, row index i, column index j
        with np.errstate(invalid='ignore'):
            dist = np.hypot(xs[None, :] - xs[:, None], ys[None, :] - ys[:, None])
            delta = totals[None, :] - totals[:, None]

        pairs = []
        for i, j in zip(*np.triu_indices(n, k=1)):
            d = float(dist[i, j]) if has_coord[i] and has_coord[j] else math.nan
            ds = float(delta[i, j]) if has_total[i] and has_total[j] else math.nan

            if math.isfinite(d) and d > 0 and math.isfinite(ds):
                ratio = ds / d
            else:
                ratio = math.nan

            pairs.append(RelativeRow(
                id1=rows[i].id,
                id2=rows[j].id,
                distance=round_or_nan(d, precision.extremum_decimals),
                delta_total=round_or_nan(ds, precision.extremum_decimals),
                ratio=round_or_nan(ratio, precision.ratio_decimals),
            ))
        return pairs


def build_relative_report(
    coords: Iterable[CoordRow],
    rows: Iterable[MeasurementRow],
    limit_sp: Optional[float] = None,
    limit_calc: Optional[float] = None
) -> RelativeReport:
    """Convenience function to build a relative report."""
    return RelativeReportBuilder().build(coords, rows, limit_sp, limit_calc)
