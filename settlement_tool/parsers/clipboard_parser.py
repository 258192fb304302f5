"""
Clipboard Parser Module

Parses tab-separated text copied from a spreadsheet. The column count of
the first line decides the layout:

    1 column   mark ids
    2 columns  X, Y coordinates (converted to mm)
    3 columns  mark, settlement, total (ids taken from existing_ids)
    4 columns  mark, settlement, total, id
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence
import logging
import re

from ..config.models import CoordRow, MeasurementRow
from ..engine.errors import UnsupportedClipboardFormatError
from ..engine.units import Unit, to_mm
from .cell_parser import looks_like_header, parse_cell, parse_number


logger = logging.getLogger(__name__)

_LINE_SPLIT_RE = re.compile(r'[\r\n]+')


class ClipboardDataType(Enum):
    """Layout detected in pasted text."""
    NONE = "none"
    IDS = "ids"
    COORDINATES = "coordinates"
    MEASUREMENTS3 = "measurements3"
    MEASUREMENTS4 = "measurements4"


@dataclass
class ClipboardParseResult:
    """Rows recovered from pasted text."""
    data_type: ClipboardDataType = ClipboardDataType.NONE
    ids: List[str] = field(default_factory=list)
    coordinates: List[CoordRow] = field(default_factory=list)
    measurements: List[MeasurementRow] = field(default_factory=list)


class ClipboardParser:
    """Parser for tab-separated clipboard text."""

    def __init__(self, coord_unit: Unit = Unit.MILLIMETER):
        """
        Initialize the parser.

        Args:
            coord_unit: Unit of pasted coordinates
        """
        self.coord_unit = coord_unit

    def parse(
        self,
        text: str,
        cycle_number: int,
        existing_ids: Optional[Sequence[str]] = None
    ) -> ClipboardParseResult:
        """
        Parse pasted text.

        Args:
            text: Clipboard text
            cycle_number: Cycle assigned to parsed measurement rows
            existing_ids: Ids for the 3-column layout, by position

        Returns:
            ClipboardParseResult (empty for blank text)

        Raises:
            UnsupportedClipboardFormatError: For 5 or more columns
        """
        result = ClipboardParseResult()
        if not text or not text.strip():
            return result

        lines = [ln for ln in _LINE_SPLIT_RE.split(text) if ln]
        if not lines:
            return result

        cols = len(lines[0].split('\t'))
        if cols == 1:
            result.data_type = ClipboardDataType.IDS
            result.ids = [ln.strip() for ln in lines]
        elif cols == 2:
            result.data_type = ClipboardDataType.COORDINATES
            result.coordinates = self._parse_coordinates(lines)
        elif cols == 3:
            result.data_type = ClipboardDataType.MEASUREMENTS3
            result.measurements = self._parse_measurements3(
                lines, cycle_number, list(existing_ids or []))
        elif cols == 4:
            result.data_type = ClipboardDataType.MEASUREMENTS4
            result.measurements = self._parse_measurements4(lines, cycle_number)
        else:
            raise UnsupportedClipboardFormatError(
                f"Unsupported clipboard layout: {cols} columns (expected 1-4)"
            )

        logger.debug(
            f"Parsed clipboard as {result.data_type.value}: {len(result.ids)} ids, "
            f"{len(result.coordinates)} coordinates, {len(result.measurements)} rows"
        )
        return result

    def _parse_coordinates(self, lines: List[str]) -> List[CoordRow]:
        coords = []
        for line in lines:
            cells = line.split('\t')
            if len(cells) < 2:
                continue
            x, y = parse_number(cells[0]), parse_number(cells[1])
            if x is None or y is None:
                continue
            coords.append(CoordRow(to_mm(x, self.coord_unit), to_mm(y, self.coord_unit)))
        return coords

    def _parse_measurements3(self, lines: List[str], cycle_number: int,
                             existing_ids: List[str]) -> List[MeasurementRow]:
        rows = []
        for line in lines:
            cells = line.split('\t')
            if len(cells) < 3 or looks_like_header(cells):
                continue

            index = len(rows)
            point_id = existing_ids[index] if index < len(existing_ids) else str(index + 1)
            rows.append(self._make_row(point_id, cells, cycle_number))
        return rows

    def _parse_measurements4(self, lines: List[str], cycle_number: int) -> List[MeasurementRow]:
        rows = []
        for line in lines:
            cells = line.split('\t')
            if len(cells) < 4 or looks_like_header(cells):
                continue

            point_id = cells[3].strip()
            if not point_id:
                continue
            rows.append(self._make_row(point_id, cells, cycle_number))
        return rows

    @staticmethod
    def _make_row(point_id: str, cells: List[str], cycle_number: int) -> MeasurementRow:
        mark, mark_raw = parse_cell(cells[0])
        settl, settl_raw = parse_cell(cells[1])
        total, total_raw = parse_cell(cells[2])
        return MeasurementRow(
            id=point_id,
            mark=mark,
            settl=settl,
            total=total,
            mark_raw=mark_raw,
            settl_raw=settl_raw,
            total_raw=total_raw,
            cycle=cycle_number,
        )


def parse_clipboard(
    text: str,
    cycle_number: int,
    existing_ids: Optional[Sequence[str]] = None,
    coord_unit: Unit = Unit.MILLIMETER
) -> ClipboardParseResult:
    """Convenience function to parse clipboard text."""
    return ClipboardParser(coord_unit).parse(text, cycle_number, existing_ids)
