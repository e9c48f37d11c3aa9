from __future__ import annotations

from dataclasses import dataclass

"""Read-only views of collaborator entities the importer reconciles against."""

__all__ = [
    "BeltLevel",
    "Member",
    "ExamSession",
]


@dataclass(frozen=True)
class BeltLevel:
    id: int
    name: str
    order_sequence: int | None = None


@dataclass(frozen=True)
class Member:
    """A club member (vo_sinh row). belt_id is the currently recorded belt."""
    id: int
    code: str | None
    full_name: str
    belt_id: int | None = None


@dataclass(frozen=True)
class ExamSession:
    """Parent grouping for imported exam rows (ky_thi_thang_cap row)."""
    id: int
    name: str
    club_id: int | None = None
