from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any

"""NormalizedRecord model.

The typed, validated result of transforming one spreadsheet row. Every field
except member_id is optional; None means "absent" (cell blank, column
missing or value unparseable) and is never written over an existing value
during an upsert merge.
"""

__all__ = [
    "NormalizedRecord",
]

# attributes that describe how the record was produced, not what to store
_NON_PERSISTED = frozenset({"row_number", "belt_low_confidence", "component_scores"})


@dataclass(frozen=True)
class NormalizedRecord:
    row_number: int  # spreadsheet row number (header = row 1)
    member_id: int
    member_code: str | None = None
    full_name: str | None = None
    current_belt_id: int | None = None
    target_belt_id: int | None = None
    score: float | None = None
    result: str | None = None
    notes: str | None = None
    club_code: str | None = None
    exam_number: str | None = None
    gender: str | None = None
    birth_date: date | None = None
    component_scores: dict[str, float] = field(default_factory=dict)
    belt_low_confidence: bool = False

    def present_values(self) -> dict[str, Any]:
        """Attribute name -> value for every field that carries a value.

        Component scores are flattened into the result under their own names.
        """
        values: dict[str, Any] = {}
        for f in fields(self):
            if f.name in _NON_PERSISTED:
                continue
            v = getattr(self, f.name)
            if v is not None:
                values[f.name] = v
        for name, v in self.component_scores.items():
            if v is not None:
                values[name] = v
        return values
