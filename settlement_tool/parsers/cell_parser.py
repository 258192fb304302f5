"""
Cell Parser Module

Parsing of single table cells into a numeric value plus the original text.
"""
from typing import Optional, Sequence, Tuple
import math
import re

from ..config.settings import get_settings


_NEW_POINT_RE = re.compile(r'\bнов', re.IGNORECASE)


def parse_number(text: str) -> Optional[float]:
    """Parse a decimal with '.' or ',' separator, None if not a number."""
    text = (text or "").strip()
    if not text:
        return None
    try:
        value = float(text.replace(',', '.'))
    except ValueError:
        return None
    return None if math.isnan(value) else value


def parse_cell(text: str) -> Tuple[Optional[float], str]:
    """
    Parse a measurement cell.

    A cell marking a new point ('нов', 'новая') counts as zero so the
    mark joins the statistics; the raw text keeps the marker.

    Args:
        text: Cell text

    Returns:
        Tuple of (value or None, trimmed raw text)
    """
    raw = (text or "").strip()
    if _NEW_POINT_RE.search(raw):
        return 0.0, raw
    return parse_number(raw), raw


def looks_like_header(cells: Sequence[str]) -> bool:
    """
    Check if a table line is a header rather than data.

    A line is a header when it contains a header keyword, or when at least
    max(2, n - 1) of its cells are neither numbers nor new-point markers.
    """
    joined = " ".join(c or "" for c in cells).lower()
    if any(stem in joined for stem in get_settings().markers.header_stems):
        return True

    non_numeric = 0
    for cell in cells:
        text = (cell or "").strip()
        if _NEW_POINT_RE.search(text):
            continue
        if parse_number(text) is None:
            non_numeric += 1
    return non_numeric >= max(2, len(cells) - 1)
