from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from datetime import date
from typing import Any

import psycopg2
from psycopg2 import sql

from ..models.entities import BeltLevel, ExamSession, Member
from .base import StoredRecord, StoreError

"""PostgreSQL ImportStore on a psycopg2 cursor.

Transaction boundaries belong to the caller (the CLI opens one transaction per
file and commits after the batch). Each row runs inside a SAVEPOINT so that a
constraint violation only discards that row's writes; without it PostgreSQL
would abort the whole transaction on the first failing statement.

Schema (existing club database):
    cap_dai            id, name, order_sequence
    vo_sinh            id, ma_hoi_vien, ho_va_ten, cap_dai_id
    ky_thi_thang_cap   id, test_name, test_date, club_id, status
"""

__all__ = [
    "PostgresStore",
]

SAVEPOINT_NAME = "import_row"


class PostgresStore:
    def __init__(self, cursor: Any) -> None:
        self.cursor = cursor

    @contextmanager
    def _wrap(self, op: str) -> Iterator[None]:
        try:
            yield
        except psycopg2.Error as e:
            raise StoreError(f"{op}: {str(e).strip()}") from e

    def _fetchall(self, query: Any, params: Sequence[Any] = ()) -> list[tuple[Any, ...]]:
        self.cursor.execute(query, params)
        return list(self.cursor.fetchall())

    def load_belt_levels(self) -> Sequence[BeltLevel]:
        with self._wrap("load belt levels"):
            rows = self._fetchall("SELECT id, name, order_sequence FROM cap_dai ORDER BY id")
        return [BeltLevel(id=r[0], name=r[1], order_sequence=r[2]) for r in rows]

    def _members(self, column: str, value: str) -> list[Member]:
        query = sql.SQL(
            "SELECT id, ma_hoi_vien, ho_va_ten, cap_dai_id FROM vo_sinh WHERE {} = %s"
        ).format(sql.Identifier(column))
        with self._wrap(f"find member by {column}"):
            rows = self._fetchall(query, (value,))
        return [Member(id=r[0], code=r[1], full_name=r[2], belt_id=r[3]) for r in rows]

    def find_members_by_code(self, code: str) -> Sequence[Member]:
        return self._members("ma_hoi_vien", code)

    def find_members_by_name(self, name: str) -> Sequence[Member]:
        return self._members("ho_va_ten", name)

    def get_session(self, session_id: int) -> ExamSession | None:
        with self._wrap("get exam session"):
            rows = self._fetchall(
                "SELECT id, test_name, club_id FROM ky_thi_thang_cap WHERE id = %s", (session_id,)
            )
        return ExamSession(id=rows[0][0], name=rows[0][1], club_id=rows[0][2]) if rows else None

    def find_session_by_name(self, name: str) -> ExamSession | None:
        with self._wrap("find exam session"):
            rows = self._fetchall(
                "SELECT id, test_name, club_id FROM ky_thi_thang_cap WHERE test_name = %s ORDER BY id LIMIT 1",
                (name,),
            )
        return ExamSession(id=rows[0][0], name=rows[0][1], club_id=rows[0][2]) if rows else None

    def create_session(self, name: str, club_id: int | None = None) -> ExamSession:
        with self._wrap("create exam session"):
            self.cursor.execute(
                "INSERT INTO ky_thi_thang_cap (test_name, test_date, club_id, status) "
                "VALUES (%s, %s, %s, 'completed') RETURNING id",
                (name, date.today(), club_id),
            )
            new_id = self.cursor.fetchone()[0]
        return ExamSession(id=new_id, name=name, club_id=club_id)

    def find_existing(self, table: str, key: Mapping[str, Any]) -> StoredRecord | None:
        where = sql.SQL(" AND ").join(
            sql.SQL("{} = %s").format(sql.Identifier(k)) for k in key
        )
        query = sql.SQL("SELECT * FROM {} WHERE {} ORDER BY id LIMIT 1").format(
            sql.Identifier(table), where
        )
        with self._wrap(f"find existing {table}"):
            self.cursor.execute(query, list(key.values()))
            row = self.cursor.fetchone()
            if row is None:
                return None
            names = [d[0] for d in self.cursor.description]
        values = dict(zip(names, row, strict=False))
        return StoredRecord(id=values["id"], values=values)

    def insert(self, table: str, values: Mapping[str, Any]) -> int:
        cols = list(values)
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING id").format(
            sql.Identifier(table),
            sql.SQL(", ").join(sql.Identifier(c) for c in cols),
            sql.SQL(", ").join(sql.Placeholder() for _ in cols),
        )
        with self._wrap(f"insert {table}"):
            self.cursor.execute(query, [values[c] for c in cols])
            return self.cursor.fetchone()[0]

    def update(self, table: str, record_id: int, values: Mapping[str, Any]) -> None:
        if not values:
            return
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(c)) for c in values
        )
        query = sql.SQL("UPDATE {} SET {} WHERE id = %s").format(sql.Identifier(table), assignments)
        with self._wrap(f"update {table}"):
            self.cursor.execute(query, [*values.values(), record_id])

    @contextmanager
    def row_scope(self) -> Iterator[None]:
        self.cursor.execute(f"SAVEPOINT {SAVEPOINT_NAME}")
        try:
            yield
        except Exception:
            self.cursor.execute(f"ROLLBACK TO SAVEPOINT {SAVEPOINT_NAME}")
            self.cursor.execute(f"RELEASE SAVEPOINT {SAVEPOINT_NAME}")
            raise
        self.cursor.execute(f"RELEASE SAVEPOINT {SAVEPOINT_NAME}")
