"""
Settlement Tool Errors

Custom errors and warnings. Report computations never raise for bad data;
these cover file formats and caller contract diagnostics.
"""


class MisalignedInputWarning(UserWarning):
    """
    Warning issued when coordinates and measurement rows differ in length.

    Relative settlement pairs points strictly by position, so a length
    mismatch usually means:
    - A coordinate was added without a matching reading
    - Rows were filtered without filtering the coordinates
    Pairing still proceeds over the shorter sequence.
    """
    pass


class ProjectFormatError(Exception):
    """
    Error raised when a project file cannot be interpreted.

    Typical causes:
    - Invalid JSON
    - Top-level value is not an object
    - Object/cycle keys that are not integers
    """
    pass


class ImportFormatError(Exception):
    """
    Error raised when a normalized measurement table lacks required columns.
    """
    pass


class UnsupportedClipboardFormatError(Exception):
    """
    Error raised when pasted tab-separated text has an unsupported layout.

    Supported layouts are 1 to 4 columns:
    ids | x, y | mark, settl, total | mark, settl, total, id
    """
    pass
