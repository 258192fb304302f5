"""
Parsers Package

Input normalization for measurement and coordinate rows.
"""
from .cell_parser import parse_cell, parse_number, looks_like_header
from .clipboard_parser import (
    ClipboardParser,
    ClipboardParseResult,
    ClipboardDataType,
    parse_clipboard
)
from .table_parser import (
    rows_from_dataframe,
    read_measurements_csv,
    coords_from_dataframe,
    read_coordinates_csv
)

__all__ = [
    'parse_cell',
    'parse_number',
    'looks_like_header',
    'ClipboardParser',
    'ClipboardParseResult',
    'ClipboardDataType',
    'parse_clipboard',
    'rows_from_dataframe',
    'read_measurements_csv',
    'coords_from_dataframe',
    'read_coordinates_csv',
]
