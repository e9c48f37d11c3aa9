from __future__ import annotations

from datetime import date, datetime
from typing import Union

"""RawRow type for decoded spreadsheet rows.

A RawRow is the ordered cell sequence of one data row as produced by the
spreadsheet decoder. It exists only for the duration of one import pass.
"""

__all__ = [
    "Cell",
    "RawRow",
    "is_blank_cell",
    "is_blank_row",
]

Cell = Union[str, int, float, bool, date, datetime, None]
RawRow = tuple[Cell, ...]


def is_blank_cell(cell: Cell) -> bool:
    """True for None and whitespace-only strings."""
    if cell is None:
        return True
    if isinstance(cell, str):
        return cell.strip() == ""
    if isinstance(cell, float) and cell != cell:  # NaN
        return True
    return False


def is_blank_row(row: RawRow) -> bool:
    """True when every cell is blank (trailing export artifact)."""
    return all(is_blank_cell(c) for c in row)
