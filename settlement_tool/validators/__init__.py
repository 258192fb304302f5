"""
Validators Package

Diagnostic checks on report inputs. Reports never depend on these; they
only surface caller contract problems as warnings.
"""
from typing import Iterable, List, Sequence
import logging

from ..config.models import (
    CoordRow, CycleState, MeasurementRow, ValidationResult
)


logger = logging.getLogger(__name__)


def check_alignment(coords: Sequence[CoordRow], rows: Sequence[MeasurementRow]) -> ValidationResult:
    """
    Check that coordinates and rows can be paired by position.

    Args:
        coords: Coordinates passed to the relative report
        rows: Measurement rows passed to the relative report

    Returns:
        ValidationResult with warnings for length mismatch, id mismatch
        and rows without coordinates
    """
    result = ValidationResult(is_valid=True)

    if len(coords) != len(rows):
        result.add_warning(
            f"{len(coords)} coordinates vs {len(rows)} rows; "
            f"only the first {min(len(coords), len(rows))} points are paired"
        )

    for index, (coord, row) in enumerate(zip(coords, rows)):
        if coord.id and row.id and coord.id.lower() != row.id.lower():
            result.add_warning(
                f"Position {index + 1}: coordinate of '{coord.id}' paired with mark '{row.id}'"
            )
        if not coord.is_valid:
            result.add_warning(f"Mark '{row.id}' has no coordinates")

    for warning in result.warnings:
        logger.warning(warning)
    return result


def check_cycle_order(states: Sequence[CycleState]) -> ValidationResult:
    """
    Check that states are ordered by ascending cycle number.

    Returns:
        ValidationResult with a warning per out-of-order cycle
    """
    result = ValidationResult(is_valid=True)
    for prev, cur in zip(states, states[1:]):
        if cur.cycle_number <= prev.cycle_number:
            result.add_warning(
                f"Cycle {cur.cycle_number} follows cycle {prev.cycle_number}"
            )
    return result


def find_duplicate_ids(rows: Iterable[MeasurementRow]) -> List[str]:
    """Ids that occur more than once (case-insensitive), first spelling."""
    first_spelling = {}
    duplicates = []
    for row in rows:
        key = (row.id or "").lower()
        if key not in first_spelling:
            first_spelling[key] = row.id
        elif first_spelling[key] not in duplicates:
            duplicates.append(first_spelling[key])
    return duplicates
