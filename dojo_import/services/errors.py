from __future__ import annotations

"""Batch-fatal errors.

These are the only exceptions the batch importer raises; they abort an
import before any row is processed. Row-level problems never surface as
exceptions (see models.row_error.RowError).
"""

__all__ = [
    "BatchImportError",
    "EmptySheetError",
    "MissingIdentityColumnError",
    "SessionNotFoundError",
]


class BatchImportError(Exception):
    """Base exception for batch-fatal import errors."""
    pass


class EmptySheetError(BatchImportError):
    """The sheet has no non-blank data rows."""


class MissingIdentityColumnError(BatchImportError):
    """Neither a member-code nor a full-name column could be found in the header."""


class SessionNotFoundError(BatchImportError):
    """The caller named an exam session id that does not exist."""
