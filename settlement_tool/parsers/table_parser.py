"""
Table Parser Module

Reads normalized long-format tables produced by an external importer:

    measurements: object, cycle, id, mark, settl, total
    coordinates:  id, x, y

Spreadsheet layout detection is not done here; the table must already
have one row per (object, cycle, mark).
"""
from pathlib import Path
from typing import Dict, List, Optional, Tuple
import logging
import math

import pandas as pd

from ..config.models import CoordRow, MeasurementRow
from ..engine.errors import ImportFormatError
from ..engine.units import Unit, to_mm
from .cell_parser import parse_cell


logger = logging.getLogger(__name__)

MEASUREMENT_COLUMNS = ['cycle', 'id', 'mark', 'settl', 'total']
COORDINATE_COLUMNS = ['id', 'x', 'y']

ObjectIndex = Dict[int, Dict[int, List[MeasurementRow]]]


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    return df


def _require(df: pd.DataFrame, columns: List[str], what: str):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ImportFormatError(f"{what} table is missing columns: {', '.join(missing)}")


def _cell(value) -> Tuple[Optional[float], str]:
    """Parse a DataFrame cell that may be numeric, text or NaN."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None, ""
    if isinstance(value, (int, float)):
        return float(value), str(value)
    return parse_cell(str(value))


def rows_from_dataframe(df: pd.DataFrame, default_object: int = 1) -> ObjectIndex:
    """
    Build the object/cycle index from a long-format DataFrame.

    Args:
        df: Table with columns cycle, id, mark, settl, total (object optional)
        default_object: Object number when the table has no object column

    Returns:
        Object number -> cycle number -> rows (table order kept)

    Raises:
        ImportFormatError: If required columns are missing
    """
    df = _normalize_columns(df)
    _require(df, MEASUREMENT_COLUMNS, "Measurement")

    objects: ObjectIndex = {}
    for record in df.to_dict('records'):
        obj = int(float(record['object'])) if 'object' in df.columns and pd.notna(record['object']) \
            else default_object
        cycle = int(float(record['cycle']))

        mark, mark_raw = _cell(record['mark'])
        settl, settl_raw = _cell(record['settl'])
        total, total_raw = _cell(record['total'])

        point_id = record['id']
        row = MeasurementRow(
            id="" if pd.isna(point_id) else str(point_id).strip(),
            mark=mark,
            settl=settl,
            total=total,
            mark_raw=mark_raw,
            settl_raw=settl_raw,
            total_raw=total_raw,
            cycle=cycle,
        )
        objects.setdefault(obj, {}).setdefault(cycle, []).append(row)

    logger.info(
        f"Imported {len(df)} rows: {len(objects)} objects, "
        f"{sum(len(c) for c in objects.values())} cycles"
    )
    return objects


def read_measurements_csv(filepath: str, default_object: int = 1) -> ObjectIndex:
    """
    Read a normalized measurement CSV.

    All columns are read as text so raw annotations ('нет доступа') survive.
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Measurement file not found: {path}")
    df = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[''])
    return rows_from_dataframe(df, default_object)


def coords_from_dataframe(df: pd.DataFrame, unit: Unit = Unit.MILLIMETER) -> List[CoordRow]:
    """
    Build coordinate rows (mm) from a DataFrame with columns id, x, y.

    Unparseable coordinates become NaN.
    """
    df = _normalize_columns(df)
    _require(df, COORDINATE_COLUMNS, "Coordinate")

    coords = []
    for record in df.to_dict('records'):
        x, _ = _cell(record['x'])
        y, _ = _cell(record['y'])
        point_id = record['id']
        coords.append(CoordRow(
            x=math.nan if x is None else to_mm(x, unit),
            y=math.nan if y is None else to_mm(y, unit),
            id="" if pd.isna(point_id) else str(point_id).strip(),
        ))
    return coords


def read_coordinates_csv(filepath: str, unit: Unit = Unit.MILLIMETER) -> List[CoordRow]:
    """Read a coordinate CSV with columns id, x, y in the given unit."""
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Coordinate file not found: {path}")
    df = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[''])
    return coords_from_dataframe(df, unit)
