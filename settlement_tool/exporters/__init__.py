"""
Exporters Package

Export modules for report summaries and tables.
Text output uses the configured encoding (UTF-8 by default).
"""
from datetime import datetime
from typing import List, Optional, Sequence
import logging
import math

from ..config.models import Extremum, GeneralReportData, RelativeReport, Series
from ..config.settings import get_settings
from ..engine.dynamics import series_to_dataframe


logger = logging.getLogger(__name__)


def _fmt(value: Optional[float], decimals: int = 4) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "-"
    return f"{value:.{decimals}f}"


def _ids(ids: Sequence[str]) -> str:
    return ", ".join(ids) if ids else "-"


class ReportTextExporter:
    """
    Export a plain-text report summary.

    Layout:
        Header (cycle label, timestamp)
        General report: extrema with ids, averages, status lists, exceedances
        Relative report: pair table and maximum relative settlement
    """

    def __init__(self):
        self.settings = get_settings()
        self.encoding = self.settings.encoding

    def export(
        self,
        filepath: str,
        general: GeneralReportData,
        relative: Optional[RelativeReport] = None,
        cycle_label: str = ""
    ):
        """
        Export the report summary.

        Args:
            filepath: Output file path
            general: General report
            relative: Relative report (section omitted if None)
            cycle_label: Caption of the reported cycle
        """
        with open(filepath, 'w', encoding=self.encoding) as f:
            f.write(f"# Settlement report - {cycle_label or 'cycle'}\n")
            f.write(f"# Generated: {datetime.now().isoformat()}\n")
            f.write("#" + "=" * 78 + "\n\n")

            self._write_general(f, general)
            if relative is not None:
                f.write("\n")
                self._write_relative(f, relative)

        logger.info(f"Report summary exported: {filepath}")

    def _write_general(self, f, general: GeneralReportData):
        f.write("GENERAL REPORT\n")
        f.write("-" * 70 + "\n")
        f.write(f"{'':<22}{'Value':>12}  Marks\n")
        self._write_extremum(f, "Max total", general.max_total)
        self._write_extremum(f, "Min total", general.min_total)
        f.write(f"{'Average total':<22}{_fmt(general.avg_total):>12}\n")
        self._write_extremum(f, "Max settlement", general.max_settl)
        self._write_extremum(f, "Min settlement", general.min_settl)
        f.write(f"{'Average settlement':<22}{_fmt(general.avg_settl):>12}\n\n")

        f.write(f"{'Total extrema':<22}{general.total_extrema}\n")
        f.write(f"{'':<22}{general.total_extrema_ids}\n")
        f.write(f"{'Settlement extrema':<22}{general.settl_extrema}\n")
        f.write(f"{'':<22}{general.settl_extrema_ids}\n\n")

        f.write(f"{'No access':<22}{_ids(general.no_access_ids)}\n")
        f.write(f"{'New':<22}{_ids(general.new_ids)}\n")
        f.write(f"{'Destroyed':<22}{_ids(general.destroyed_ids)}\n")
        f.write(f"{'Exceeds SP limit':<22}{_ids(general.exceed_total_sp_ids)}\n")
        f.write(f"{'Exceeds calc limit':<22}{_ids(general.exceed_total_calc_ids)}\n")

    @staticmethod
    def _write_extremum(f, caption: str, extremum: Extremum):
        f.write(f"{caption:<22}{_fmt(extremum.value):>12}  {_ids(extremum.ids)}\n")

    def _write_relative(self, f, relative: RelativeReport):
        f.write("RELATIVE REPORT\n")
        f.write("-" * 70 + "\n")
        f.write(f"{'Pair':<20}{'Distance':>14}{'Delta':>12}{'Ratio':>14}\n")
        for row in relative.all_rows:
            f.write(
                f"{row.label:<20}{_fmt(row.distance, 1):>14}"
                f"{_fmt(row.delta_total, 2):>12}{_fmt(row.ratio, 6):>14}\n"
            )
        f.write("-" * 70 + "\n")
        f.write(
            f"{'Max relative':<20}{_fmt(relative.max_relative.value, 6):>14}  "
            f"{_ids(relative.max_relative.ids)}\n"
        )
        f.write(f"{'Exceeds SP limit':<20}{_ids([r.label for r in relative.exceeded_sp_rows])}\n")
        f.write(f"{'Exceeds calc limit':<20}{_ids([r.label for r in relative.exceeded_calc_rows])}\n")


def export_report_text(
    filepath: str,
    general: GeneralReportData,
    relative: Optional[RelativeReport] = None,
    cycle_label: str = ""
):
    """Export a plain-text report summary."""
    exporter = ReportTextExporter()
    exporter.export(filepath, general, relative, cycle_label)


def export_relative_csv(filepath: str, report: RelativeReport):
    """Export the relative pair table (Id1, Id2, Distance, DeltaTotal, Ratio)."""
    report.to_dataframe().to_csv(filepath, index=False, encoding=get_settings().encoding)
    logger.info(f"Relative table exported: {filepath} ({len(report.all_rows)} pairs)")


def export_dynamics_csv(filepath: str, series: List[Series]):
    """Export dynamics series as a cycle x mark pivot of totals."""
    series_to_dataframe(series).to_csv(filepath, encoding=get_settings().encoding)
    logger.info(f"Dynamics exported: {filepath} ({len(series)} series)")


__all__ = [
    'ReportTextExporter',
    'export_report_text',
    'export_relative_csv',
    'export_dynamics_csv',
]
