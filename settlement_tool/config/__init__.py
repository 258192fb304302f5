"""
Config Package

Configuration, data models and persistence for the settlement tool.
"""
from .settings import (
    get_settings,
    Settings,
    has_new_marker,
    has_no_access_marker,
    has_destroyed_marker
)

from .models import (
    CycleStateKind,
    CoordRow,
    MeasurementRow,
    CycleState,
    CycleSegment,
    Extremum,
    GeneralReportData,
    RelativeRow,
    RelativeReport,
    DynamicsPoint,
    Series,
    ReportLimits,
    ValidationResult,
    ProjectData
)

from .project_manager import ProjectManager
from .settings_manager import SettingsManager, get_settings_manager

__all__ = [
    # Settings
    'get_settings',
    'Settings',
    'has_new_marker',
    'has_no_access_marker',
    'has_destroyed_marker',

    # Models
    'CycleStateKind',
    'CoordRow',
    'MeasurementRow',
    'CycleState',
    'CycleSegment',
    'Extremum',
    'GeneralReportData',
    'RelativeRow',
    'RelativeReport',
    'DynamicsPoint',
    'Series',
    'ReportLimits',
    'ValidationResult',
    'ProjectData',

    # Persistence
    'ProjectManager',
    'SettingsManager',
    'get_settings_manager',
]
