from __future__ import annotations

from collections.abc import Mapping, Sequence
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Any, Protocol

from ..models.entities import BeltLevel, ExamSession, Member

"""Persistence collaborator interface for the batch importer.

The importer never talks to a database directly. It reads belt levels once,
runs point queries for members, and upserts one record per row through an
ImportStore. Every row is processed inside row_scope() so a failed write
for one row can be undone without touching rows that already succeeded.
"""

__all__ = [
    "StoreError",
    "StoredRecord",
    "ImportStore",
]


class StoreError(Exception):
    """Raised by a store when a read or write fails (constraint violation etc.)."""


@dataclass(frozen=True)
class StoredRecord:
    id: int
    values: Mapping[str, Any]


class ImportStore(Protocol):
    def load_belt_levels(self) -> Sequence[BeltLevel]: ...

    def find_members_by_code(self, code: str) -> Sequence[Member]: ...

    def find_members_by_name(self, name: str) -> Sequence[Member]: ...

    def get_session(self, session_id: int) -> ExamSession | None: ...

    def find_session_by_name(self, name: str) -> ExamSession | None: ...

    def create_session(self, name: str, club_id: int | None = None) -> ExamSession: ...

    def find_existing(self, table: str, key: Mapping[str, Any]) -> StoredRecord | None: ...

    def insert(self, table: str, values: Mapping[str, Any]) -> int: ...

    def update(self, table: str, record_id: int, values: Mapping[str, Any]) -> None: ...

    def row_scope(self) -> AbstractContextManager[None]: ...
