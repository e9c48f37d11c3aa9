from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Logical import targets and their header keyword lists.

A logical field names what a column means (member code, target belt, ...)
independently of where it sits in the spreadsheet. FieldSpec pairs a field
with the header phrases that may announce it, most specific phrase first.
"""

__all__ = [
    "LogicalField",
    "FieldSpec",
]


class LogicalField(Enum):
    """Known import targets."""
    MEMBER_CODE = "member_code"
    FULL_NAME = "full_name"
    CURRENT_BELT = "current_belt"
    TARGET_BELT = "target_belt"
    SCORE = "score"
    RESULT = "result"
    NOTES = "notes"
    # exam score sheet columns
    CLUB_CODE = "club_code"
    EXAM_NUMBER = "exam_number"
    GENDER = "gender"
    BIRTH_DATE = "birth_date"
    STANCE_TECHNIQUE = "stance_technique"
    POWER_PRINCIPLES = "power_principles"
    HAND_BASICS = "hand_basics"
    KICKING_TECHNIQUE = "kicking_technique"
    SELF_DEFENSE = "self_defense"
    POOMSAE = "poomsae"
    POOMSAE_APPLICATION = "poomsae_application"
    SPARRING = "sparring"
    FITNESS = "fitness"


@dataclass(frozen=True)
class FieldSpec:
    """Header keywords for one logical field (evaluated in order)."""
    field: LogicalField
    keywords: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.keywords:
            raise ValueError(f"field spec for {self.field.name} has no keywords")
