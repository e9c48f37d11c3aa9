from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .row_error import RowError

"""ErrorRecord model for the JSON Lines error log.

Each rejected row of an import run becomes one ErrorRecord. row=-1 marks a
file-level failure where no single row is to blame (e.g. an unreadable
workbook or a missing identity column).
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Spreadsheet filename being imported
        sheet: Sheet name within the file
        row: Spreadsheet row number, -1 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human-readable reason
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_row_error(file: str, sheet: str, error: RowError) -> ErrorRecord:
        return ErrorRecord.create(
            file=file,
            sheet=sheet,
            row=error.row_number,
            error_type=error.category.error_type,
            message=error.reason,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line with exactly the dataclass keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
