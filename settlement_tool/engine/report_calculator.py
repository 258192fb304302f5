"""
Report Calculator Module

Recomputes both reports for the current selection of rows. Callers invoke
recalc() whenever rows, coordinates or limits change; nothing is cached.
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence
import logging
import math

from ..config.models import (
    CoordRow, GeneralReportData, MeasurementRow, RelativeReport, RelativeRow, ReportLimits
)
from .general_report import GeneralReportBuilder
from .relative_report import RelativeReportBuilder


logger = logging.getLogger(__name__)


@dataclass
class ReportBundle:
    """Both reports plus their exceedance display strings."""
    general: GeneralReportData
    relative: RelativeReport
    rows: List[MeasurementRow] = field(default_factory=list)
    exceed_total_sp_display: str = ""
    exceed_total_calc_display: str = ""
    exceed_rel_sp_display: str = ""
    exceed_rel_calc_display: str = ""


def align_coords_by_id(rows: Sequence[MeasurementRow], coords: Iterable[CoordRow]) -> List[CoordRow]:
    """
    Coordinates in the order of rows, matched by id (case-insensitive).

    Rows without a coordinate get a NaN coordinate so positional pairing
    stays aligned.
    """
    lookup = {}
    for coord in coords:
        lookup.setdefault((coord.id or "").lower(), coord)
    return [
        lookup.get((row.id or "").lower()) or CoordRow(math.nan, math.nan, row.id)
        for row in rows
    ]


def format_total_exceedances(ids: Iterable[str], rows: Sequence[MeasurementRow]) -> str:
    """'№<id>(<total>)' entries joined by commas."""
    by_id = {}
    for row in rows:
        by_id.setdefault(row.id, row)

    parts = []
    for point_id in ids:
        row = by_id.get(point_id)
        if row is not None and row.total is not None:
            parts.append(f"№{point_id}({row.total:.1f})")
        else:
            parts.append(point_id)
    return ", ".join(parts)


def format_relative_exceedances(pairs: Iterable[RelativeRow]) -> str:
    """'<id1>-<id2>(<ratio>)' entries joined by commas."""
    return ", ".join(f"{p.label}({p.ratio:.5f})" for p in pairs)


class ReportCalculator:
    """Orchestrates the general and relative reports for one cycle."""

    def __init__(self):
        self.general_builder = GeneralReportBuilder()
        self.relative_builder = RelativeReportBuilder()

    def recalc(
        self,
        rows: Iterable[MeasurementRow],
        coords: Iterable[CoordRow],
        limits: Optional[ReportLimits] = None
    ) -> ReportBundle:
        """
        Build both reports.

        Marks annotated as no access or destroyed are left out of both
        reports. Coordinates are matched to the remaining rows by id.

        Args:
            rows: Active rows of the selected (object, cycle)
            coords: Coordinates carrying the mark id
            limits: Exceedance limits (all disabled if None)

        Returns:
            ReportBundle
        """
        limits = limits or ReportLimits()
        active = [r for r in rows if r.is_available_for_calculations()]

        general = self.general_builder.build(
            active,
            limits.max_nomen or 0,
            limits.max_calculated or 0,
        )

        aligned = align_coords_by_id(active, coords)
        relative = self.relative_builder.build(
            aligned,
            active,
            limits.rel_nomen,
            limits.rel_calculated,
        )

        logger.info(
            f"Recalculated reports: {len(active)} active rows, "
            f"{len(relative.all_rows)} pairs"
        )
        return ReportBundle(
            general=general,
            relative=relative,
            rows=active,
            exceed_total_sp_display=format_total_exceedances(general.exceed_total_sp_ids, active),
            exceed_total_calc_display=format_total_exceedances(general.exceed_total_calc_ids, active),
            exceed_rel_sp_display=format_relative_exceedances(relative.exceeded_sp_rows),
            exceed_rel_calc_display=format_relative_exceedances(relative.exceeded_calc_rows),
        )
