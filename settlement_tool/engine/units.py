"""
Unit Conversion Module

Millimeter-based linear unit conversion. All internal storage is in
millimeters; conversion happens only at I/O boundaries.
"""
from enum import Enum


class Unit(Enum):
    """Linear units supported at I/O boundaries."""
    MILLIMETER = "mm"
    CENTIMETER = "cm"
    DECIMETER = "dm"
    METER = "m"


# Millimeters per unit
_MM_PER_UNIT = {
    Unit.MILLIMETER: 1.0,
    Unit.CENTIMETER: 10.0,
    Unit.DECIMETER: 100.0,
    Unit.METER: 1000.0,
}

_LABELS = {
    Unit.MILLIMETER: "мм",
    Unit.CENTIMETER: "см",
    Unit.DECIMETER: "дм",
    Unit.METER: "м",
}


def mm_to(mm: float, target: Unit) -> float:
    """Convert millimeters to the target unit."""
    return mm / _MM_PER_UNIT.get(target, 1.0)


def to_mm(value: float, source: Unit) -> float:
    """Convert a value in the source unit to millimeters."""
    return value * _MM_PER_UNIT.get(source, 1.0)


def format_mm(mm: float, target: Unit, decimals: int = 3) -> str:
    """
    Format a millimeter value in the target unit with its label.

    Example:
        format_mm(1234.5, Unit.METER) -> "1.234 м"
    """
    return f"{round(mm_to(mm, target), decimals)} {_LABELS.get(target, 'мм')}"


def parse_unit(text: str) -> Unit:
    """
    Parse a unit name ("mm", "cm", "dm", "m" or the Russian labels).

    Raises:
        ValueError: If the name is not recognized
    """
    key = (text or "").strip().lower()
    for unit in Unit:
        if key == unit.value or key == _LABELS[unit]:
            return unit
    raise ValueError(f"Unknown unit: {text!r}")
