from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from ..db.base import ImportStore, StoreError
from ..excel.reader import DecodedSheet
from ..logging.error_log import ErrorLogBuffer
from ..models.entities import ExamSession
from ..models.error_record import ErrorRecord
from ..models.fields import LogicalField
from ..models.header_map import HeaderMap
from ..models.import_summary import ImportSummary
from ..models.normalized_record import NormalizedRecord
from ..models.raw_row import is_blank_row
from ..models.row_error import ErrorCategory, RowError
from ..resolve.entities import DEFAULT_BELT_QUALIFIER, BeltLevelIndex
from ..resolve.headers import resolve_headers
from .errors import EmptySheetError, MissingIdentityColumnError
from .profiles import ImportProfile
from .progress import RowProgressTracker
from .sessions import resolve_session
from .transform import TransformContext, transform_row

"""Batch importer: rows -> persisted records + ImportSummary.

Rows are processed strictly in source order, one at a time, so a later row's
upsert sees the writes of earlier rows (two rows for the same member and
session merge instead of duplicating). Every row runs inside the store's
row_scope(); a store failure for one row is rolled back, recorded as a
RowError and the batch moves on.

Only batch preconditions raise (see services.errors): no data rows, no
identity column in the header, unknown caller-supplied session.
"""

__all__ = [
    "ImportOptions",
    "UpsertOutcome",
    "import_batch",
    "upsert_record",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportOptions:
    strict_enums: bool = False
    belt_substring_fallback: bool = True
    belt_qualifier: str = DEFAULT_BELT_QUALIFIER


@dataclass(frozen=True)
class UpsertOutcome:
    record_id: int
    created: bool


def upsert_record(
    store: ImportStore, profile: ImportProfile, record: NormalizedRecord, session: ExamSession
) -> UpsertOutcome:
    """Insert the record, or merge it over the existing one for the same key.

    Only columns that carry a value are written on update, so a re-imported
    row with an empty cell never clears a previously recorded value.
    """
    key = profile.key_for(record, session)
    values = profile.to_columns(record)
    existing = store.find_existing(profile.table, key)
    if existing is not None:
        store.update(profile.table, existing.id, values)
        return UpsertOutcome(record_id=existing.id, created=False)
    new_id = store.insert(profile.table, {**profile.insert_defaults, **key, **values})
    return UpsertOutcome(record_id=new_id, created=True)


def _check_preconditions(sheet: DecodedSheet, profile: ImportProfile) -> HeaderMap:
    if not any(not is_blank_row(r) for r in sheet.data_rows):
        raise EmptySheetError("spreadsheet must have a header row and at least one data row")
    header_map = resolve_headers(sheet.header_row, profile.field_specs)
    if not (header_map.has(LogicalField.MEMBER_CODE) or header_map.has(LogicalField.FULL_NAME)):
        raise MissingIdentityColumnError(
            'spreadsheet must have a "Mã hội viên" (member code) or "Họ tên" (full name) column'
        )
    return header_map


def import_batch(
    sheet: DecodedSheet,
    profile: ImportProfile,
    store: ImportStore,
    *,
    session_id: int | None = None,
    club_id: int | None = None,
    file_name: str | None = None,
    options: ImportOptions | None = None,
    belt_index: BeltLevelIndex | None = None,
    error_log: ErrorLogBuffer | None = None,
    progress: bool = False,
) -> ImportSummary:
    """Import every data row of a decoded sheet.

    Args:
        sheet: Decoded spreadsheet (header row + data rows)
        profile: Call-site configuration (fields, table, upsert key)
        store: Persistence collaborator
        session_id: Existing exam session to attach rows to; derived from the
            file name and looked up or created when None
        club_id: Club for an auto-created session
        file_name: Source file name (defaults to sheet.source_name)
        options: Enum strictness and belt resolution switches
        belt_index: Prebuilt index to share across batches; built from
            store.load_belt_levels() when None
        error_log: Buffer receiving one ErrorRecord per rejected row
        progress: Show a tqdm progress bar (TTY only)

    Returns:
        ImportSummary with counts and the ordered list of row errors.

    Raises:
        EmptySheetError, MissingIdentityColumnError, SessionNotFoundError
    """
    options = options or ImportOptions()
    file_name = file_name or sheet.source_name
    start_time = datetime.now(UTC)

    header_map = _check_preconditions(sheet, profile)
    logger.info("profile=%s columns=%s", profile.name, header_map.describe())

    session, session_created = resolve_session(store, session_id, file_name, club_id)

    if belt_index is None:
        belt_index = BeltLevelIndex.build(
            store.load_belt_levels(),
            qualifier=options.belt_qualifier,
            allow_substring=options.belt_substring_fallback,
        )
    ctx = TransformContext(
        profile=profile, members=store, belts=belt_index, strict_enums=options.strict_enums
    )

    errors: list[RowError] = []
    low_confidence: list[int] = []
    inserted = updated = skipped = 0

    with RowProgressTracker(len(sheet.data_rows), enabled=progress) as tracker:
        for i, row in enumerate(sheet.data_rows):
            row_number = i + 2  # header is spreadsheet row 1
            saving = False
            try:
                with store.row_scope():
                    outcome = transform_row(row, row_number, header_map, ctx)
                    if isinstance(outcome, NormalizedRecord):
                        saving = True
                        result = upsert_record(store, profile, outcome, session)
            except StoreError as e:
                if saving:
                    outcome = RowError(row_number, str(e), ErrorCategory.PERSISTENCE_FAILED)
                else:
                    outcome = RowError(row_number, f"member lookup failed: {e}", ErrorCategory.LOOKUP_FAILED)

            if outcome is None:
                skipped += 1
            elif isinstance(outcome, RowError):
                errors.append(outcome)
                logger.warning("row=%d rejected: %s", row_number, outcome.reason)
                if error_log is not None:
                    error_log.append(
                        ErrorRecord.from_row_error(file_name or "<unknown>", sheet.sheet_name, outcome)
                    )
            else:
                if result.created:
                    inserted += 1
                else:
                    updated += 1
                if outcome.belt_low_confidence:
                    low_confidence.append(row_number)
                logger.info(
                    "row=%d %s member_id=%d record_id=%d",
                    row_number,
                    "imported" if result.created else "updated",
                    outcome.member_id,
                    result.record_id,
                )
            tracker.advance(imported=inserted + updated, failed=len(errors))

    end_time = datetime.now(UTC)
    return ImportSummary(
        file_name=file_name or "",
        imported=inserted + updated,
        failed=len(errors),
        errors=tuple(errors),
        inserted=inserted,
        updated=updated,
        skipped_blank=skipped,
        session=session,
        session_created=session_created,
        low_confidence_rows=tuple(low_confidence),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )
