"""
Settlement Monitoring Tool
==========================
A Python package for tracking settlement-survey measurements of monitored
marks across survey cycles.

Supports:
- Normalized CSV and tab-separated (clipboard) measurement tables
- JSON project files (objects, cycles, coordinates, limits)

Features:
- Cycle state classification and timeline segmentation
- General report: extrema, averages, exceedances, status lists
- Relative report: differential settlement between all point pairs
- Dynamics series for charting
- Text and CSV export of report data
"""

__version__ = "1.0.0"
__author__ = "Settlement Tools"

from .config.models import MeasurementRow, CoordRow
from .engine.cycle_segments import CycleStateGroup
from .config.settings import Settings
