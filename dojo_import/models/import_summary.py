from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .entities import ExamSession
from .row_error import RowError

"""ImportSummary model: the result of one batch import call.

Constructed fresh by import_batch, returned to the caller and never persisted.
The transport shape (HTTP body, CLI output) belongs to the caller; to_dict()
only fixes the logical fields.
"""

__all__ = [
    "ImportSummary",
]

DEFAULT_ERROR_DISPLAY_LIMIT = 20


@dataclass(frozen=True)
class ImportSummary:
    """Aggregated outcome of one batch.

    imported counts rows that ended in a persisted create-or-update (inserted +
    updated). failed counts rejected rows, whether rejected by the transformer
    or by the store. Blank rows land in skipped_blank and in neither count.
    """
    file_name: str
    imported: int
    failed: int
    errors: tuple[RowError, ...]
    inserted: int = 0
    updated: int = 0
    skipped_blank: int = 0
    session: ExamSession | None = None
    session_created: bool = False
    low_confidence_rows: tuple[int, ...] = ()
    start_time: datetime | None = None
    end_time: datetime | None = None
    elapsed_seconds: float = 0.0

    @property
    def created_aux_entity_id(self) -> int | None:
        """Id of the exam session when this batch had to create it."""
        if self.session is not None and self.session_created:
            return self.session.id
        return None

    def error_lines(self, limit: int = DEFAULT_ERROR_DISPLAY_LIMIT) -> list[str]:
        """Operator-facing error list: the first `limit` errors plus an omission note."""
        lines = [str(e) for e in self.errors[:limit]]
        omitted = len(self.errors) - limit
        if omitted > 0:
            lines.append(f"... and {omitted} more errors")
        return lines

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "imported": self.imported,
            "failed": self.failed,
            "errors": [e.to_dict() for e in self.errors],
        }
        if self.session is not None:
            data["session_id"] = self.session.id
        if self.created_aux_entity_id is not None:
            data["created_aux_entity_id"] = self.created_aux_entity_id
        return data
