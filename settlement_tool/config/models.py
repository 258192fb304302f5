"""
Data Models for Settlement Monitoring

Core data structures used throughout the settlement tool.
All lengths and settlements are stored in millimeters.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Dict
from enum import Enum
import math
import pandas as pd

from .settings import (
    get_settings, has_no_access_marker, has_destroyed_marker
)


class CycleStateKind(Enum):
    """State of a point in one survey cycle."""
    MISSING = 0     # No row for this cycle
    MEASURED = 1    # Numeric reading present
    NEW = 2         # "нов" - first appearance of the mark
    NO_ACCESS = 3   # "нет доступа" - mark could not be reached
    DESTROYED = 4   # "уничтожена" - mark lost
    TEXT = 5        # Free-text annotation without a reading


@dataclass
class CoordRow:
    """Planar coordinate of a mark in millimeters."""
    x: float = math.nan
    y: float = math.nan
    id: str = ""

    @property
    def is_valid(self) -> bool:
        """True if both coordinates are finite."""
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass
class MeasurementRow:
    """Reading of one mark in one survey cycle."""
    id: str = ""
    mark: Optional[float] = None    # Elevation reading, mm
    settl: Optional[float] = None   # Settlement since previous cycle, mm
    total: Optional[float] = None   # Cumulative settlement, mm
    mark_raw: str = ""
    settl_raw: str = ""
    total_raw: str = ""
    cycle: int = 0

    def __post_init__(self):
        """Raw text is never None."""
        self.mark_raw = self.mark_raw or ""
        self.settl_raw = self.settl_raw or ""
        self.total_raw = self.total_raw or ""

    @property
    def mark_display(self) -> str:
        if self.mark is None:
            return self.mark_raw
        return f"{self.mark:.{get_settings().precision.mark_decimals}f}"

    @property
    def settl_display(self) -> str:
        if self.settl is None:
            return self.settl_raw
        return f"{self.settl:.{get_settings().precision.settl_decimals}f}"

    @property
    def total_display(self) -> str:
        if self.total is None:
            return self.total_raw
        return f"{self.total:.{get_settings().precision.total_decimals}f}"

    @property
    def combined_raw(self) -> str:
        """Raw texts joined by spaces."""
        return " ".join([self.mark_raw, self.settl_raw, self.total_raw]).strip()

    def is_available_for_calculations(self) -> bool:
        """
        Check whether the mark takes part in this cycle's calculations.

        Marks annotated as "no access" or "destroyed" are excluded even when
        a numeric value is present.
        """
        combined = self.combined_raw
        if has_no_access_marker(combined):
            return False
        if has_destroyed_marker(combined):
            return False
        return True


@dataclass(frozen=True)
class CycleState:
    """State of a point group in one cycle."""
    cycle_number: int
    kind: CycleStateKind
    annotation: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.kind != CycleStateKind.MISSING


@dataclass(frozen=True)
class CycleSegment:
    """Maximal run of consecutive same-kind, non-missing states."""
    start_index: int
    span: int
    cycle_from: int
    cycle_to: int
    kind: CycleStateKind
    annotation: Optional[str] = None

    @property
    def end_index(self) -> int:
        return self.start_index + self.span - 1


@dataclass
class Extremum:
    """Extreme value with every id attaining it."""
    value: float
    ids: List[str] = field(default_factory=list)


@dataclass
class GeneralReportData:
    """Aggregate statistics for one (object, cycle)."""
    max_total: Extremum
    min_total: Extremum
    avg_total: Optional[float]
    max_settl: Extremum
    min_settl: Extremum
    avg_settl: Optional[float]
    no_access_ids: List[str]
    new_ids: List[str]
    destroyed_ids: List[str]
    exceed_total_sp_ids: List[str]
    exceed_total_calc_ids: List[str]
    total_extrema: str
    settl_extrema: str
    total_extrema_ids: str
    settl_extrema_ids: str


@dataclass
class RelativeRow:
    """Differential settlement between two marks."""
    id1: str
    id2: str
    distance: float     # mm
    delta_total: float  # mm
    ratio: float        # delta_total / distance

    @property
    def label(self) -> str:
        return f"{self.id1}-{self.id2}"


@dataclass
class RelativeReport:
    """All-pairs relative settlement for one cycle."""
    all_rows: List[RelativeRow]
    exceeded_sp_rows: List[RelativeRow]
    exceeded_calc_rows: List[RelativeRow]
    max_relative: Extremum

    def to_dataframe(self) -> pd.DataFrame:
        """Convert all pair rows to a pandas DataFrame."""
        data = []
        for row in self.all_rows:
            data.append({
                'Id1': row.id1,
                'Id2': row.id2,
                'Distance': row.distance,
                'DeltaTotal': row.delta_total,
                'Ratio': row.ratio,
            })
        return pd.DataFrame(data, columns=['Id1', 'Id2', 'Distance', 'DeltaTotal', 'Ratio'])


@dataclass(frozen=True)
class DynamicsPoint:
    """Total settlement of a mark at one cycle."""
    cycle: int
    total: float


@dataclass
class Series:
    """Time series of one mark across cycles."""
    id: str
    points: List[DynamicsPoint] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert points to a pandas DataFrame (Cycle, Total)."""
        data = [{'Cycle': p.cycle, 'Total': p.total} for p in self.points]
        return pd.DataFrame(data, columns=['Cycle', 'Total'])


@dataclass
class ReportLimits:
    """Exceedance limits; None disables the check."""
    max_nomen: Optional[float] = None
    max_calculated: Optional[float] = None
    rel_nomen: Optional[float] = None
    rel_calculated: Optional[float] = None


@dataclass
class ValidationResult:
    """Result of a diagnostic check."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str):
        """Add an error and mark as invalid."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str):
        """Add a warning without marking invalid."""
        self.warnings.append(message)


@dataclass
class ProjectData:
    """Container for a complete settlement monitoring project."""
    cycle: int = 1
    max_nomen: Optional[float] = None
    max_calculated: Optional[float] = None
    rel_nomen: Optional[float] = None
    rel_calculated: Optional[float] = None
    selected_cycle_header: Optional[str] = None

    data_rows: List[MeasurementRow] = field(default_factory=list)
    coord_rows: List[CoordRow] = field(default_factory=list)

    # Object number -> cycle number -> rows
    objects: Dict[int, Dict[int, List[MeasurementRow]]] = field(default_factory=dict)
    cycle_labels: Dict[int, str] = field(default_factory=dict)

    dwg_path: Optional[str] = None
    project_path: Optional[str] = None

    @property
    def limits(self) -> ReportLimits:
        return ReportLimits(
            max_nomen=self.max_nomen,
            max_calculated=self.max_calculated,
            rel_nomen=self.rel_nomen,
            rel_calculated=self.rel_calculated,
        )

    def get_cycles(self, object_number: int) -> Dict[int, List[MeasurementRow]]:
        """Get the cycle index of one object (empty if unknown)."""
        return self.objects.get(object_number, {})

    def get_rows(self, object_number: int, cycle_number: int) -> List[MeasurementRow]:
        """Get the rows of one (object, cycle)."""
        return self.get_cycles(object_number).get(cycle_number, [])

    def set_rows(self, object_number: int, cycle_number: int, rows: List[MeasurementRow]):
        """Store the rows of one (object, cycle)."""
        self.objects.setdefault(object_number, {})[cycle_number] = list(rows)

    def rows_to_dataframe(self) -> pd.DataFrame:
        """Flatten the object/cycle index to a long-format DataFrame."""
        data = []
        for obj in sorted(self.objects):
            for cycle in sorted(self.objects[obj]):
                for row in self.objects[obj][cycle]:
                    data.append({
                        'object': obj,
                        'cycle': cycle,
                        'id': row.id,
                        'mark': row.mark,
                        'settl': row.settl,
                        'total': row.total,
                    })
        return pd.DataFrame(data, columns=['object', 'cycle', 'id', 'mark', 'settl', 'total'])
