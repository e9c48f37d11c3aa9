from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .fields import LogicalField
from .raw_row import Cell, RawRow

"""HeaderMap model: logical field -> column index.

Built once per sheet by the header resolver. Invariants (enforced on
construction): at most one column per field, and a column is claimed by at
most one field.
"""

__all__ = [
    "HeaderMap",
]


@dataclass(frozen=True)
class HeaderMap:
    columns: Mapping[LogicalField, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        seen: dict[int, LogicalField] = {}
        for f, idx in self.columns.items():
            if idx < 0:
                raise ValueError(f"negative column index for {f.name}: {idx}")
            if idx in seen:
                raise ValueError(
                    f"column {idx} claimed by both {seen[idx].name} and {f.name}"
                )
            seen[idx] = f

    def get(self, f: LogicalField) -> int | None:
        return self.columns.get(f)

    def has(self, f: LogicalField) -> bool:
        return f in self.columns

    def cell(self, row: RawRow, f: LogicalField) -> Cell:
        """Cell value for a field, or None when the field is absent or the row is short."""
        idx = self.columns.get(f)
        if idx is None or idx >= len(row):
            return None
        return row[idx]

    def describe(self) -> dict[str, int]:
        """Field name -> 1-based column number, for operator output."""
        return {f.value: (i + 1) for f, i in self.columns.items()}
