from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ..models.raw_row import Cell, RawRow

"""Spreadsheet decoding: workbook file -> header row + data rows.

The first row of the selected worksheet is the header; every following row is
a data row. Cells are converted to plain Python values (str, int, float,
bool, datetime or None) so nothing downstream depends on pandas or numpy
scalar types. Only the empty string is treated as a missing value, so text
such as "NA" or "null" reaches the normalizers unchanged.
"""

__all__ = [
    "SheetReadError",
    "DecodedSheet",
    "decode_frame",
    "read_sheet",
]


class SheetReadError(Exception):
    """Raised when a file cannot be opened or decoded as a spreadsheet."""


@dataclass(frozen=True)
class DecodedSheet:
    header_row: RawRow
    data_rows: tuple[RawRow, ...]
    sheet_name: str = ""
    source_name: str | None = None  # file name the sheet came from

    @property
    def width(self) -> int:
        return len(self.header_row)

    @classmethod
    def from_rows(
        cls, rows: list[list[Any]], sheet_name: str = "", source_name: str | None = None
    ) -> DecodedSheet:
        """Build from an array-of-rows (first row = header)."""
        if not rows:
            return cls(header_row=(), data_rows=(), sheet_name=sheet_name, source_name=source_name)
        header = tuple(_to_cell(c) for c in rows[0])
        data = tuple(tuple(_to_cell(c) for c in r) for r in rows[1:])
        return cls(header_row=header, data_rows=data, sheet_name=sheet_name, source_name=source_name)


def _to_cell(value: Any) -> Cell:
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, (float, np.floating)):
        f = float(value)
        return None if math.isnan(f) else f
    if isinstance(value, np.datetime64):
        ts = pd.Timestamp(value)
        return None if ts is pd.NaT else ts.to_pydatetime()
    if isinstance(value, (str, int, bool, datetime)):
        return value
    return str(value)


def decode_frame(df: pd.DataFrame, sheet_name: str = "", source_name: str | None = None) -> DecodedSheet:
    """Split a header-less DataFrame into header row and data rows."""
    rows = df.to_numpy(dtype=object).tolist()
    return DecodedSheet.from_rows(rows, sheet_name=sheet_name, source_name=source_name)


def read_sheet(path: Path, sheet_name: str | None = None) -> DecodedSheet:
    """Read one worksheet (the first by default) or a CSV file.

    Raises:
        SheetReadError: file missing, unreadable or sheet not present
    """
    if not path.exists():
        raise SheetReadError(f"file not found: {path}")
    try:
        if path.suffix.lower() == ".csv":
            df = pd.read_csv(path, header=None, dtype=object, keep_default_na=False, na_values=[""])
            name = path.stem
        else:
            xls = pd.ExcelFile(path)
            name = sheet_name if sheet_name is not None else str(xls.sheet_names[0])
            if name not in [str(s) for s in xls.sheet_names]:
                raise SheetReadError(f"sheet '{name}' not found in {path.name}")
            df = xls.parse(name, header=None, keep_default_na=False, na_values=[""])
    except SheetReadError:
        raise
    except Exception as e:
        raise SheetReadError(f"cannot read {path.name}: {e}") from e
    return decode_frame(df, sheet_name=name, source_name=path.name)
