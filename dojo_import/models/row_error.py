from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""RowError model and error taxonomy for rejected rows.

Row-level problems are data, not exceptions: each rejected row yields one
RowError, and any number of them accumulate in an ImportSummary without
stopping the batch.
"""

__all__ = [
    "ErrorCategory",
    "RowError",
]


class ErrorCategory(Enum):
    """Why a row was rejected."""
    MISSING_IDENTIFIER = "missing-identifier"
    ENTITY_NOT_FOUND = "entity-not-found"
    MISSING_REQUIRED_FIELD = "missing-required-field"
    UNRESOLVABLE_REFERENCE = "unresolvable-reference"
    UNRECOGNIZED_VALUE = "unrecognized-value"  # strict enum mode only
    LOOKUP_FAILED = "lookup-failed"  # store read error while resolving the row
    PERSISTENCE_FAILED = "persistence-failed"

    @property
    def error_type(self) -> str:
        """UPPER_SNAKE form used in the JSON error log."""
        return self.name


@dataclass(frozen=True)
class RowError:
    """One rejected row.

    Attributes:
        row_number: Spreadsheet row number. Data row i (0-based) is row i + 2
            because the header occupies row 1.
        reason: Human-readable message suitable for an operator.
        category: Error classification.
    """
    row_number: int
    reason: str
    category: ErrorCategory

    def __str__(self) -> str:
        return f"Row {self.row_number}: {self.reason}"

    def to_dict(self) -> dict[str, object]:
        return {"row": self.row_number, "reason": self.reason, "category": self.category.value}
