from __future__ import annotations

import math
import re
import unicodedata
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..models.raw_row import Cell

"""Cell normalization: raw spreadsheet cell -> typed value.

All functions here are total. Malformed input yields an "absent" result
(None, or "" for text) and never an exception; the row transformer decides
whether absence is fatal for the field in question.

Spreadsheet tools store dates as serial day counts and often store
text-looking numbers (member codes, scores) as numeric cells, so every
function accepts the full cell union (str | int | float | bool | date | None).
"""

__all__ = [
    "EXCEL_EPOCH",
    "EnumSpec",
    "RESULT_SPEC",
    "GENDER_SPEC",
    "normalize_text",
    "normalize_date",
    "normalize_score",
    "match_enum",
    "normalize_enum",
]

# Day 0 of the 1900 date system. Using 12-30 instead of 12-31 absorbs the
# phantom 1900-02-29 for every serial after February 1900.
EXCEL_EPOCH = date(1899, 12, 30)

_NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_ISO_DATE_RE = re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$")
_DAY_FIRST_SPLIT_RE = re.compile(r"[/-]")


def _nfc(text: str) -> str:
    return unicodedata.normalize("NFC", text)


def normalize_text(cell: Cell) -> str:
    """Return the cell as a trimmed string, "" when blank.

    Booleans become "1"/"0", integral floats lose their ".0" (85.0 -> "85")
    and dates render as YYYY-MM-DD.
    """
    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "1" if cell else "0"
    if isinstance(cell, float):
        if math.isnan(cell):
            return ""
        if cell.is_integer():
            return str(int(cell))
        return str(cell)
    if isinstance(cell, datetime):
        return cell.date().isoformat()
    if isinstance(cell, date):
        return cell.isoformat()
    return _nfc(str(cell)).strip()


def _from_serial(value: float) -> date | None:
    if not math.isfinite(value) or value < 0:
        return None
    try:
        return EXCEL_EPOCH + timedelta(days=math.floor(value))
    except OverflowError:
        return None


def _parse_iso(text: str) -> date | None:
    m = _ISO_DATE_RE.match(text)
    if m:
        y, mo, d = (int(g) for g in m.groups())
        try:
            return date(y, mo, d)
        except ValueError:
            return None
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _parse_day_first(text: str) -> date | None:
    # "15/03/2024 08:00" -> "15/03/2024"
    head = text.split()[0] if text.split() else ""
    parts = _DAY_FIRST_SPLIT_RE.split(head)
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None
    day, month, year = parts
    if len(year) != 4:
        return None
    try:
        return date.fromisoformat(f"{year}-{int(month):02d}-{int(day):02d}")
    except ValueError:
        return None


def normalize_date(cell: Cell) -> date | None:
    """Parse a date cell.

    Encodings are tried in this order:

    1. serial day count relative to 1899-12-30 (numeric cell or numeric text;
       the time-of-day fraction is dropped)
    2. ISO-ish text: YYYY-MM-DD, YYYY/MM/DD or a full ISO timestamp
    3. day-first text: DD/MM/YYYY or DD-MM-YYYY

    Returns None when nothing matches or the calendar date is invalid.
    """
    if cell is None or isinstance(cell, bool):
        return None
    if isinstance(cell, datetime):
        return cell.date()
    if isinstance(cell, date):
        return cell
    if isinstance(cell, (int, float)):
        return _from_serial(float(cell))

    text = _nfc(str(cell)).strip()
    if not text:
        return None
    if _NUMERIC_RE.match(text):
        return _from_serial(float(text))
    return _parse_iso(text) or _parse_day_first(text)


def normalize_score(cell: Cell) -> float | None:
    """Parse a score; blank and non-numeric cells are absent (not zero).

    A single decimal comma is accepted ("8,5" -> 8.5).
    """
    if cell is None or isinstance(cell, bool):
        return None
    if isinstance(cell, (int, float)):
        value = float(cell)
    elif isinstance(cell, str):
        text = cell.strip()
        if not text:
            return None
        if text.count(",") == 1 and "." not in text:
            text = text.replace(",", ".")
        if not _NUMERIC_RE.match(text):
            return None
        value = float(text)
    else:
        return None
    if not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class EnumSpec:
    """Keyword table for a text enumeration.

    choices are evaluated in declaration order; a choice matches when any of
    its keywords is contained (case-insensitively) in the cell text.
    """
    choices: tuple[tuple[str, tuple[str, ...]], ...]
    default: str

    @property
    def values(self) -> tuple[str, ...]:
        return tuple(v for v, _ in self.choices) + (self.default,)


# "Không đạt" contains "đạt": fail must be declared before pass.
RESULT_SPEC = EnumSpec(
    choices=(
        ("fail", ("không", "khong", "chưa đạt", "chua dat", "trượt", "truot", "fail")),
        ("pending", ("chưa có", "chua co", "pending")),
        ("pass", ("đạt", "dat", "pass")),
    ),
    default="pending",
)

GENDER_SPEC = EnumSpec(
    choices=(
        ("Nữ", ("nữ", "nu", "female")),
        ("Nam", ("nam", "male")),
    ),
    default="Nam",
)


def match_enum(cell: Cell, spec: EnumSpec) -> str | None:
    """Return the first matching enum value, or None when no keyword matches."""
    text = normalize_text(cell).lower()
    if not text:
        return None
    for value, keywords in spec.choices:
        for kw in keywords:
            if _nfc(kw).lower() in text:
                return value
    return None


def normalize_enum(cell: Cell, spec: EnumSpec) -> str:
    """Map a cell to an enum value, falling back to spec.default."""
    value = match_enum(cell, spec)
    return spec.default if value is None else value
