"""
Dynamics Module

Pivots the cycle index of one object into per-mark time series of total
settlement for charting.
"""
from typing import Dict, List, Mapping, Sequence
import logging

import pandas as pd

from ..config.models import DynamicsPoint, MeasurementRow, Series


logger = logging.getLogger(__name__)


def build_dynamics(cycles: Mapping[int, Sequence[MeasurementRow]]) -> List[Series]:
    """
    Build one series per distinct mark id.

    Ids appear in first-seen order. Points are ordered by cycle; a cycle
    without the id, or where its total is None, contributes no point.

    Args:
        cycles: Cycle number -> rows of that cycle

    Returns:
        List of Series
    """
    ids: List[str] = []
    seen = set()
    for rows in cycles.values():
        for row in rows:
            if row.id not in seen:
                seen.add(row.id)
                ids.append(row.id)

    # First row per id in each cycle
    lookup: Dict[int, Dict[str, MeasurementRow]] = {}
    for cycle, rows in cycles.items():
        per_id: Dict[str, MeasurementRow] = {}
        for row in rows:
            per_id.setdefault(row.id, row)
        lookup[cycle] = per_id

    result = []
    for point_id in ids:
        points = []
        for cycle in sorted(cycles):
            row = lookup[cycle].get(point_id)
            if row is not None and row.total is not None:
                points.append(DynamicsPoint(cycle, row.total))
        result.append(Series(point_id, points))

    logger.debug(f"Built {len(result)} dynamics series over {len(cycles)} cycles")
    return result


def series_to_dataframe(series: Sequence[Series]) -> pd.DataFrame:
    """
    Cycle x mark table of totals (NaN where a mark has no point).

    Rows are cycles in ascending order, columns are mark ids.
    """
    data = {s.id: pd.Series({p.cycle: p.total for p in s.points}, dtype=float) for s in series}
    frame = pd.DataFrame(data)
    frame = frame.reindex(columns=[s.id for s in series]).sort_index()
    frame.index.name = 'Cycle'
    return frame
