from __future__ import annotations

from .entities import BeltLevel, ExamSession, Member
from .error_record import ErrorRecord
from .fields import FieldSpec, LogicalField
from .header_map import HeaderMap
from .import_summary import DEFAULT_ERROR_DISPLAY_LIMIT, ImportSummary
from .normalized_record import NormalizedRecord
from .raw_row import Cell, RawRow, is_blank_cell, is_blank_row
from .row_error import ErrorCategory, RowError

__all__ = [
    "BeltLevel",
    "Cell",
    "DEFAULT_ERROR_DISPLAY_LIMIT",
    "ErrorCategory",
    "ErrorRecord",
    "ExamSession",
    "FieldSpec",
    "HeaderMap",
    "ImportSummary",
    "LogicalField",
    "Member",
    "NormalizedRecord",
    "RawRow",
    "RowError",
    "is_blank_cell",
    "is_blank_row",
]
