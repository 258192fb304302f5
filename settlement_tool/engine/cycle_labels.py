"""
Cycle label helpers.
"""
from typing import Mapping, Optional


def extract_date_tail(label: Optional[str]) -> Optional[str]:
    """
    Last whitespace-separated token of a cycle label.

    Cycle headers usually end with the survey date, e.g.
    'Цикл 3 от 12.05.2024' -> '12.05.2024'.
    """
    if label is None or not label.strip():
        return None
    stripped = label.rstrip()
    parts = stripped.split()
    return parts[-1] if parts else stripped


def cycle_caption(cycle_number: int, labels: Mapping[int, str]) -> str:
    """Label of a cycle, or 'Цикл N' when it has none."""
    label = labels.get(cycle_number, "")
    return label.strip() if label and label.strip() else f"Цикл {cycle_number}"
