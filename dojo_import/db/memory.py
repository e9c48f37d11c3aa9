from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from ..models.entities import BeltLevel, ExamSession, Member
from .base import StoredRecord, StoreError

"""In-memory ImportStore.

Holds belt levels, members, exam sessions and imported tables in plain dicts.
Used by the test-suite and by callers that want to preview an import without
a database. row_scope() snapshots the tables and restores them when the
block raises, mirroring the per-row SAVEPOINT of the PostgreSQL store.
"""

__all__ = [
    "MemoryStore",
]


class MemoryStore:
    def __init__(
        self,
        belts: Iterable[BeltLevel] = (),
        members: Iterable[Member] = (),
        sessions: Iterable[ExamSession] = (),
    ) -> None:
        self.belts: list[BeltLevel] = list(belts)
        self.members: list[Member] = list(members)
        self.sessions: dict[int, ExamSession] = {s.id: s for s in sessions}
        self.tables: dict[str, dict[int, dict[str, Any]]] = {}
        self._next_id: dict[str, int] = {}
        self.queries = 0  # member point queries issued

    # -- reads -------------------------------------------------------------
    def load_belt_levels(self) -> Sequence[BeltLevel]:
        return list(self.belts)

    def find_members_by_code(self, code: str) -> Sequence[Member]:
        self.queries += 1
        return [m for m in self.members if m.code is not None and m.code == code]

    def find_members_by_name(self, name: str) -> Sequence[Member]:
        self.queries += 1
        return [m for m in self.members if m.full_name == name]

    def get_session(self, session_id: int) -> ExamSession | None:
        return self.sessions.get(session_id)

    def find_session_by_name(self, name: str) -> ExamSession | None:
        for s in self.sessions.values():
            if s.name == name:
                return s
        return None

    # -- writes ------------------------------------------------------------
    def _allocate_id(self, table: str) -> int:
        nxt = self._next_id.get(table, 1)
        self._next_id[table] = nxt + 1
        return nxt

    def create_session(self, name: str, club_id: int | None = None) -> ExamSession:
        used = max(self.sessions, default=0)
        session = ExamSession(id=used + 1, name=name, club_id=club_id)
        self.sessions[session.id] = session
        return session

    def find_existing(self, table: str, key: Mapping[str, Any]) -> StoredRecord | None:
        for rid, values in self.tables.get(table, {}).items():
            if all(values.get(k) == v for k, v in key.items()):
                return StoredRecord(id=rid, values=dict(values))
        return None

    def insert(self, table: str, values: Mapping[str, Any]) -> int:
        rid = self._allocate_id(table)
        self.tables.setdefault(table, {})[rid] = dict(values)
        return rid

    def update(self, table: str, record_id: int, values: Mapping[str, Any]) -> None:
        rows = self.tables.get(table, {})
        if record_id not in rows:
            raise StoreError(f"{table}: no record with id {record_id}")
        rows[record_id].update(values)

    @contextmanager
    def row_scope(self) -> Iterator[None]:
        snapshot = copy.deepcopy(self.tables)
        next_ids = dict(self._next_id)
        try:
            yield
        except Exception:
            self.tables = snapshot
            self._next_id = next_ids
            raise

    # -- helpers -----------------------------------------------------------
    def rows(self, table: str) -> dict[int, dict[str, Any]]:
        return self.tables.get(table, {})
