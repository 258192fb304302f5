"""
Cycle Segments Module

Classifies each mark's per-cycle reading into a state kind, groups marks
that share the same state history, and compresses each group's states into
timeline segments for display.
"""
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple
from functools import cmp_to_key
import logging
import math
import re

from ..config.models import (
    CycleState, CycleSegment, CycleStateKind, MeasurementRow
)
from ..config.settings import (
    get_settings, has_new_marker, has_no_access_marker, has_destroyed_marker
)


logger = logging.getLogger(__name__)

MEANINGS = {
    CycleStateKind.MEASURED: "Измерено",
    CycleStateKind.NEW: "Новая точка",
    CycleStateKind.NO_ACCESS: "Нет доступа",
    CycleStateKind.DESTROYED: "Уничтожена",
    CycleStateKind.TEXT: "Особая отметка",
    CycleStateKind.MISSING: "Нет данных",
}

DEFAULT_ACCENT_COLOR = "#4CAF50"

_POINT_NUMBER_RE = re.compile(r'^\s*(\d+)')


# ---------------------------------------------------------------------------
# State classification
# ---------------------------------------------------------------------------

def _is_number(value: Optional[float]) -> bool:
    return value is not None and not math.isnan(value)


def has_numeric(row: MeasurementRow) -> bool:
    """Check if any of mark/settl/total holds a number."""
    return _is_number(row.mark) or _is_number(row.settl) or _is_number(row.total)


def determine_state(row: MeasurementRow) -> Tuple[CycleStateKind, Optional[str]]:
    """
    Classify one reading.

    Order of checks on the combined raw text:
        empty text      -> MEASURED if numeric, else MISSING
        new marker      -> NEW
        no access       -> NO_ACCESS
        destroyed       -> DESTROYED
        numeric value   -> MEASURED (annotation dropped)
        otherwise       -> TEXT

    Args:
        row: MeasurementRow to classify

    Returns:
        Tuple of (kind, annotation)
    """
    combined = " ".join(
        s for s in (row.mark_raw, row.settl_raw, row.total_raw) if s and s.strip()
    )
    numeric = has_numeric(row)

    if not combined.strip():
        return (CycleStateKind.MEASURED if numeric else CycleStateKind.MISSING), None

    if has_new_marker(combined):
        return CycleStateKind.NEW, combined
    if has_no_access_marker(combined):
        return CycleStateKind.NO_ACCESS, combined
    if has_destroyed_marker(combined):
        return CycleStateKind.DESTROYED, combined
    if numeric:
        return CycleStateKind.MEASURED, None

    return CycleStateKind.TEXT, combined


def create_cycle_state(cycle_number: int, row: Optional[MeasurementRow]) -> CycleState:
    """Create the state of a mark in a cycle; no row means MISSING."""
    if row is None:
        return CycleState(cycle_number, CycleStateKind.MISSING, None)
    kind, annotation = determine_state(row)
    return CycleState(cycle_number, kind, annotation)


# ---------------------------------------------------------------------------
# Segmentation
# ---------------------------------------------------------------------------

def build_segments(states: Sequence[CycleState]) -> List[CycleSegment]:
    """
    Compress runs of identical adjacent kinds into segments.

    Missing runs are never emitted, so a missing cycle splits two runs of
    the same kind into two segments. States must be ordered by cycle.
    """
    segments: List[CycleSegment] = []
    if not states:
        return segments

    start = 0
    kind = states[0].kind
    annotation = states[0].annotation

    def emit(end: int):
        if kind != CycleStateKind.MISSING:
            segments.append(CycleSegment(
                start_index=start,
                span=end - start + 1,
                cycle_from=states[start].cycle_number,
                cycle_to=states[end].cycle_number,
                kind=kind,
                annotation=annotation,
            ))

    for i in range(1, len(states)):
        state = states[i]
        if state.kind == kind:
            continue
        emit(i - 1)
        start = i
        kind = state.kind
        annotation = state.annotation

    emit(len(states) - 1)
    return segments


def group_segments_by_kind(
    segments: Sequence[CycleSegment]
) -> List[Tuple[CycleStateKind, List[CycleSegment]]]:
    """Group segments by kind, kinds in first-seen order."""
    grouped: Dict[CycleStateKind, List[CycleSegment]] = {}
    for segment in segments:
        grouped.setdefault(segment.kind, []).append(segment)
    return list(grouped.items())


def rebuild_segments(
    states: Sequence[CycleState]
) -> Tuple[List[CycleSegment], List[Tuple[CycleStateKind, List[CycleSegment]]]]:
    """
    Build segments and kind groups from an ordered state sequence.

    Returns:
        Tuple of (segments, [(kind, segments of that kind), ...])
    """
    segments = build_segments(states)
    return segments, group_segments_by_kind(segments)


class CycleMeaningGroup:
    """Segments of one group that share a state kind."""

    def __init__(self, owner: 'CycleStateGroup', kind: CycleStateKind,
                 segments: Iterable[CycleSegment], display_order: int = 0):
        if owner is None:
            raise ValueError("owner is required")
        self.owner: Optional['CycleStateGroup'] = owner
        self.kind = kind
        self.segments: List[CycleSegment] = list(segments or [])
        self.display_order = display_order
        self._detached_title: Optional[str] = None

    @property
    def meaning(self) -> str:
        return MEANINGS.get(self.kind, self.kind.name)

    @property
    def title(self) -> str:
        """'<group name> — <meaning>', follows renames of the owner."""
        if self.owner is None:
            return self._detached_title or self.meaning
        name = self.owner.display_name
        prefix = f"{name} — " if name and name.strip() else ""
        return prefix + self.meaning

    @property
    def is_alternate_row(self) -> bool:
        return self.display_order % 2 == 1

    @property
    def is_first_row(self) -> bool:
        return self.display_order == 0

    def detach(self):
        """Release the owner; the title stays as it was."""
        if self.owner is not None:
            self._detached_title = self.title
            self.owner = None

    def __repr__(self) -> str:
        return f"CycleMeaningGroup({self.kind.name}, segments={len(self.segments)})"


class CycleStateGroup:
    """
    Marks that share one state history across cycles.

    The group owns its segments and meaning groups; rebuild_segments()
    replaces both wholesale from the current states.
    """

    def __init__(self, key: str, states: Iterable[CycleState]):
        if not key:
            raise ValueError("Key cannot be empty")
        self.key = key
        self.display_name = ""
        self.states: List[CycleState] = list(states or [])
        self.point_ids: List[str] = []
        self.segments: List[CycleSegment] = []
        self.meaning_groups: List[CycleMeaningGroup] = []
        self.is_enabled = True
        self._accent_color = DEFAULT_ACCENT_COLOR
        self.has_custom_color = False

    @property
    def accent_color(self) -> str:
        return self._accent_color

    @accent_color.setter
    def accent_color(self, color: str):
        self._accent_color = color
        self.has_custom_color = True

    def set_accent_color(self, color: str, mark_custom: bool):
        """Set the color without necessarily flagging it as user-chosen."""
        self._accent_color = color
        self.has_custom_color = mark_custom

    def rebuild_segments(self):
        """Rebuild segments and meaning groups from the states."""
        for meaning in self.meaning_groups:
            meaning.detach()

        segments, by_kind = rebuild_segments(self.states)
        self.segments = segments
        self.meaning_groups = [
            CycleMeaningGroup(self, kind, same_kind, display_order=order)
            for order, (kind, same_kind) in enumerate(by_kind)
        ]

    def sort_point_ids(self):
        """Sort point ids in natural order."""
        if len(self.point_ids) > 1:
            self.point_ids.sort(key=point_id_sort_key)

    def __repr__(self) -> str:
        return (f"CycleStateGroup({self.display_name or self.key!r}, "
                f"points={len(self.point_ids)}, segments={len(self.segments)})")


# ---------------------------------------------------------------------------
# Point ordering and grouping
# ---------------------------------------------------------------------------

def point_id_sort_key(point_id: str) -> Tuple[int, int, str]:
    """
    Natural sort key: ids with a leading number first, by that number,
    then case-insensitive text (folded to upper case).
    """
    match = _POINT_NUMBER_RE.match(point_id or "")
    if match:
        return 0, int(match.group(1)), (point_id or "").upper()
    return 1, 0, (point_id or "").upper()


def compare_point_ids(left: Optional[str], right: Optional[str]) -> int:
    """Three-way comparison consistent with point_id_sort_key."""
    if left is right:
        return 0
    if left is None:
        return -1
    if right is None:
        return 1
    a, b = point_id_sort_key(left), point_id_sort_key(right)
    return (a > b) - (a < b)


point_id_comparator = cmp_to_key(compare_point_ids)


def build_state_key(states: Iterable[CycleState]) -> str:
    """Signature of a state history, e.g. '1|1|0|3'."""
    return "|".join(str(s.kind.value) for s in states)


def build_cycle_groups(cycles: Mapping[int, Sequence[MeasurementRow]]) -> List[CycleStateGroup]:
    """
    Group the marks of one object by their state history.

    Args:
        cycles: Cycle number -> rows of that cycle

    Returns:
        Groups ordered by point count (descending) then key, named
        'Группа 1..N', with segments built
    """
    if not cycles:
        return []

    ordered_cycles = sorted(cycles)

    # Case-insensitive ids; the first spelling seen is kept
    points: Dict[str, Tuple[str, Dict[int, MeasurementRow]]] = {}
    for cycle, rows in cycles.items():
        for row in rows:
            if not row.id or not row.id.strip():
                continue
            folded = row.id.lower()
            if folded not in points:
                points[folded] = (row.id, {})
            points[folded][1][cycle] = row

    grouped: Dict[str, CycleStateGroup] = {}
    for folded in sorted(points):
        point_id, per_cycle = points[folded]
        states = [create_cycle_state(c, per_cycle.get(c)) for c in ordered_cycles]
        key = build_state_key(states)

        group = grouped.get(key)
        if group is None:
            group = CycleStateGroup(key, states)
            grouped[key] = group
        group.point_ids.append(point_id)

    prefix = get_settings().group_name_prefix
    result = sorted(grouped.values(), key=lambda g: (-len(g.point_ids), g.key.lower()))
    for index, group in enumerate(result, start=1):
        group.sort_point_ids()
        group.display_name = f"{prefix} {index}"
        group.rebuild_segments()

    logger.debug(f"Built {len(result)} cycle groups from {len(points)} points "
                 f"over {len(ordered_cycles)} cycles")
    return result


# ---------------------------------------------------------------------------
# Active-point filter
# ---------------------------------------------------------------------------

class PointFilter:
    """
    Set of marks excluded from calculations and charts.

    Ids are matched case-insensitively and stored folded to lower case.
    """

    def __init__(self, disabled: Optional[Iterable[str]] = None):
        self.disabled: Set[str] = set()
        if disabled:
            self.set_disabled(disabled)

    def is_enabled(self, point_id: str) -> bool:
        return (point_id or "").lower() not in self.disabled

    def set_disabled(self, ids: Iterable[str]):
        """Replace the disabled set (blank ids ignored)."""
        self.disabled = {i.lower() for i in ids if i and i.strip()}

    def prune(self, known_ids: Iterable[str]):
        """Forget disabled ids that no longer exist (case-insensitive)."""
        known = {i.lower() for i in known_ids}
        self.disabled = {i for i in self.disabled if i in known}

    def set_group_enabled(self, group: CycleStateGroup, enable: bool):
        """Enable or disable every mark of a group."""
        if group is None:
            return
        for point_id in group.point_ids:
            if enable:
                self.disabled.discard((point_id or "").lower())
            elif point_id and point_id.strip():
                self.disabled.add(point_id.lower())
        group.is_enabled = enable

    def toggle_group(self, group: CycleStateGroup):
        if group is None:
            return
        self.set_group_enabled(group, not group.is_enabled)

    def refresh_groups(self, groups: Iterable[CycleStateGroup]):
        """A group is enabled while any of its marks is enabled."""
        for group in groups:
            group.is_enabled = any(self.is_enabled(i) for i in group.point_ids)

    def active_rows(self, rows: Iterable[MeasurementRow]) -> List[MeasurementRow]:
        return [r for r in rows if self.is_enabled(r.id)]

    def active_cycles_snapshot(
        self, cycles: Mapping[int, Sequence[MeasurementRow]]
    ) -> Dict[int, List[MeasurementRow]]:
        """Copy of the cycle index without disabled marks."""
        return {cycle: self.active_rows(rows) for cycle, rows in cycles.items()}
