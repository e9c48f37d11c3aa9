from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..models.fields import LogicalField as F
from ..models.header_map import HeaderMap
from ..models.normalized_record import NormalizedRecord
from ..models.raw_row import RawRow, is_blank_cell, is_blank_row
from ..models.row_error import ErrorCategory, RowError
from ..normalize.cells import (
    GENDER_SPEC,
    RESULT_SPEC,
    EnumSpec,
    match_enum,
    normalize_date,
    normalize_score,
    normalize_text,
)
from ..resolve.entities import BeltLevelIndex, BeltMatch, MemberLookup, resolve_member
from .profiles import ImportProfile

"""Row transformer: one raw row -> NormalizedRecord or RowError.

Composes the cell normalizer, the header map and the entity resolvers.
transform_row() returns None for fully blank rows (silently skipped), a
RowError for a rejected row, or the assembled NormalizedRecord. It never
raises for bad data.
"""

__all__ = [
    "TransformContext",
    "transform_row",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformContext:
    """Everything transform_row needs besides the row itself."""
    profile: ImportProfile
    members: MemberLookup
    belts: BeltLevelIndex
    strict_enums: bool = False


class _Reject(Exception):
    def __init__(self, category: ErrorCategory, reason: str) -> None:
        super().__init__(reason)
        self.category = category
        self.reason = reason


def _text(row: RawRow, header_map: HeaderMap, f: F) -> str:
    return normalize_text(header_map.cell(row, f))


def _optional_text(row: RawRow, header_map: HeaderMap, f: F) -> str | None:
    return _text(row, header_map, f) or None


def _enum(
    row: RawRow, header_map: HeaderMap, f: F, spec: EnumSpec, strict: bool, label: str
) -> str | None:
    """Blank -> None; unrecognized text -> default, or rejection in strict mode."""
    cell = header_map.cell(row, f)
    if is_blank_cell(cell):
        return None
    value = match_enum(cell, spec)
    if value is not None:
        return value
    if strict:
        raise _Reject(ErrorCategory.UNRECOGNIZED_VALUE, f"unrecognized {label} ({normalize_text(cell)})")
    logger.debug("unrecognized %s %r -> %s", label, normalize_text(cell), spec.default)
    return spec.default


def _score(row: RawRow, header_map: HeaderMap, f: F, row_number: int) -> float | None:
    cell = header_map.cell(row, f)
    value = normalize_score(cell)
    if value is None and not is_blank_cell(cell):
        logger.debug("row=%d %s not numeric (%r), left empty", row_number, f.value, cell)
    return value


def _resolve_belt(belts: BeltLevelIndex, text: str, row_number: int, label: str) -> BeltMatch | None:
    match = belts.resolve(text)
    if match is not None and match.low_confidence:
        logger.warning(
            "row=%d %s %r matched by substring on %r (low confidence)", row_number, label, text, match.key
        )
    return match


def _build(row: RawRow, row_number: int, header_map: HeaderMap, ctx: TransformContext) -> NormalizedRecord:
    profile = ctx.profile

    code = _text(row, header_map, F.MEMBER_CODE)
    name = _text(row, header_map, F.FULL_NAME)
    if not code and not name:
        raise _Reject(ErrorCategory.MISSING_IDENTIFIER, "missing student identifier (member code or full name)")

    match = resolve_member(code, name, ctx.members)
    if match is None:
        raise _Reject(ErrorCategory.ENTITY_NOT_FOUND, f"student not found ({code or name})")
    member = match.member

    values: dict[str, Any] = {}
    low_confidence = False

    if profile.uses(F.CURRENT_BELT):
        current = member.belt_id
        text = _text(row, header_map, F.CURRENT_BELT)
        if text:
            found = _resolve_belt(ctx.belts, text, row_number, "current belt")
            if found is not None:
                current = found.belt_id
                low_confidence |= found.low_confidence
            else:
                logger.warning("row=%d current belt %r not found, keeping recorded belt", row_number, text)
        values["current_belt_id"] = current

    if profile.uses(F.TARGET_BELT):
        required = F.TARGET_BELT in profile.required_fields
        text = _text(row, header_map, F.TARGET_BELT)
        target = None
        if text:
            found = _resolve_belt(ctx.belts, text, row_number, "target belt")
            if found is not None:
                target = found.belt_id
                low_confidence |= found.low_confidence
            elif required:
                raise _Reject(ErrorCategory.UNRESOLVABLE_REFERENCE, f"target belt level not found ({text})")
            else:
                logger.warning("row=%d belt level %r not found, left empty", row_number, text)
        elif required:
            raise _Reject(ErrorCategory.MISSING_REQUIRED_FIELD, "missing target belt level")
        values["target_belt_id"] = target

    if profile.uses(F.SCORE):
        values["score"] = _score(row, header_map, F.SCORE, row_number)
    if profile.uses(F.RESULT):
        values["result"] = _enum(row, header_map, F.RESULT, RESULT_SPEC, ctx.strict_enums, "result")
    if profile.uses(F.GENDER):
        values["gender"] = _enum(row, header_map, F.GENDER, GENDER_SPEC, ctx.strict_enums, "gender")
    if profile.uses(F.BIRTH_DATE):
        cell = header_map.cell(row, F.BIRTH_DATE)
        values["birth_date"] = normalize_date(cell)
        if values["birth_date"] is None and not is_blank_cell(cell):
            logger.debug("row=%d birth date %r not parseable, left empty", row_number, cell)
    if profile.uses(F.NOTES):
        values["notes"] = _optional_text(row, header_map, F.NOTES)
    if profile.uses(F.CLUB_CODE):
        values["club_code"] = _optional_text(row, header_map, F.CLUB_CODE)
    if profile.uses(F.EXAM_NUMBER):
        values["exam_number"] = _optional_text(row, header_map, F.EXAM_NUMBER)
    if profile.store_identity:
        values["member_code"] = code or member.code
        values["full_name"] = name or member.full_name

    components = {
        attr: score
        for f, attr in profile.component_fields.items()
        if (score := _score(row, header_map, f, row_number)) is not None
    }

    return NormalizedRecord(
        row_number=row_number,
        member_id=member.id,
        component_scores=components,
        belt_low_confidence=low_confidence,
        **values,
    )


def transform_row(
    row: Sequence[Any], row_number: int, header_map: HeaderMap, ctx: TransformContext
) -> NormalizedRecord | RowError | None:
    """Transform one data row.

    Args:
        row: Raw cells of the data row
        row_number: Spreadsheet row number used in error messages
        header_map: Column bindings for the sheet
        ctx: Profile, member lookup and belt index

    Returns:
        None for a blank row, a RowError for a rejected row, otherwise the
        NormalizedRecord.
    """
    raw = tuple(row)
    if is_blank_row(raw):
        return None
    try:
        return _build(raw, row_number, header_map, ctx)
    except _Reject as r:
        return RowError(row_number=row_number, reason=r.reason, category=r.category)
