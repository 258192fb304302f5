"""
Engine Package

Core settlement calculation modules.
"""
from .units import (
    Unit,
    mm_to,
    to_mm,
    format_mm,
    parse_unit
)

from .cycle_segments import (
    CycleMeaningGroup,
    CycleStateGroup,
    PointFilter,
    determine_state,
    create_cycle_state,
    build_segments,
    group_segments_by_kind,
    rebuild_segments,
    build_cycle_groups,
    compare_point_ids,
    point_id_sort_key
)

from .general_report import (
    GeneralReportBuilder,
    build_general_report,
    exceeded
)

from .relative_report import (
    RelativeReportBuilder,
    build_relative_report
)

from .dynamics import (
    build_dynamics,
    series_to_dataframe
)

from .report_calculator import (
    ReportBundle,
    ReportCalculator,
    align_coords_by_id
)

from .cycle_labels import (
    extract_date_tail,
    cycle_caption
)

__all__ = [
    # Units
    'Unit',
    'mm_to',
    'to_mm',
    'format_mm',
    'parse_unit',

    # Cycle segmentation
    'CycleMeaningGroup',
    'CycleStateGroup',
    'PointFilter',
    'determine_state',
    'create_cycle_state',
    'build_segments',
    'group_segments_by_kind',
    'rebuild_segments',
    'build_cycle_groups',
    'compare_point_ids',
    'point_id_sort_key',

    # Reports
    'GeneralReportBuilder',
    'build_general_report',
    'exceeded',
    'RelativeReportBuilder',
    'build_relative_report',
    'ReportBundle',
    'ReportCalculator',
    'align_coords_by_id',

    # Dynamics
    'build_dynamics',
    'series_to_dataframe',

    # Cycle labels
    'extract_date_tail',
    'cycle_caption',
]
