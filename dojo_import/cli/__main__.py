from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import psycopg2
from dotenv import load_dotenv

from ..config.loader import ConfigError, ImportConfig, load_config
from ..db.base import ImportStore, StoreError
from ..db.postgres import PostgresStore
from ..excel.reader import DecodedSheet, SheetReadError, read_sheet
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary, setup_logging
from ..models.error_record import ErrorRecord
from ..normalize.cells import normalize_text
from ..resolve.headers import resolve_headers
from ..services.errors import BatchImportError
from ..services.importer import ImportOptions, import_batch
from ..services.profiles import PROFILES, get_profile
from ..services.summary import render_error_report, render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (overrides the process environment) and the YAML config
- Decode the spreadsheet (first sheet unless --sheet is given)
- Open one PostgreSQL transaction, run the batch, commit
- Print per-row outcomes, the error report and the SUMMARY line

Exit codes: 0 every data row imported, 2 some rows rejected, 1 fatal
(config, unreadable file, batch precondition, database unavailable).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_SAMPLE_ROWS = 3


def _dsn(cfg: ImportConfig) -> str:
    """Connection string; environment (.env already loaded) wins over the config file.

    DATABASE_URL / PGDSN are used whole. Otherwise PGHOST, PGPORT, PGUSER,
    PGPASSWORD and PGDATABASE, each falling back to the database section.
    """
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def _db_connection(cfg: ImportConfig) -> Iterator[ImportStore]:  # pragma: no cover (needs a live database)
    """Yield a PostgresStore inside one transaction.

    Commits when the block finishes, rolls back when it raises.
    """
    try:
        conn = psycopg2.connect(_dsn(cfg))
    except psycopg2.Error as e:
        raise StoreError(f"cannot connect to database: {str(e).strip()}") from e
    conn.autocommit = False
    try:
        with conn.cursor() as cur:
            yield PostgresStore(cur)
        conn.commit()
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; its values replace existing variables."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="dojo-import", description="Import a belt test spreadsheet into the club database"
    )
    p.add_argument("file", type=Path, help="Spreadsheet to import (.xlsx, .xls or .csv)")
    p.add_argument("--profile", choices=sorted(PROFILES), help="Import profile (default from config)")
    p.add_argument("--sheet", help="Worksheet name (default: first sheet)")
    p.add_argument("--session-id", type=int, help="Existing exam session id to attach rows to")
    p.add_argument("--club-id", type=int, help="Club id for an auto-created exam session")
    p.add_argument("--config", type=Path, help="YAML config file (default: config/import.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print header mapping & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(sheet: DecodedSheet, profile_name: str) -> int:
    profile = get_profile(profile_name)
    header_map = resolve_headers(sheet.header_row, profile.field_specs)
    print(f"FILE: {sheet.source_name} SHEET: {sheet.sheet_name} rows={len(sheet.data_rows)}")
    print(f"  header={[normalize_text(c) for c in sheet.header_row]}")
    print(f"  profile={profile.name} columns={header_map.describe()}")
    for i, row in enumerate(sheet.data_rows[:INSPECT_SAMPLE_ROWS]):
        safe = [c.isoformat() if hasattr(c, "isoformat") else c for c in row]
        print(f"  row {i + 2}: {safe}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # only read sys.argv when no list is given, so main([...]) in tests stays isolated
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    profile_name = args.profile or cfg.profile
    error_log = ErrorLogBuffer(cfg.error_log_dir)
    file_name = args.file.name

    try:
        sheet = read_sheet(args.file, args.sheet)
    except SheetReadError as e:
        logger.error(f"read: {e}")
        error_log.append(ErrorRecord.create(file_name, args.sheet or "", -1, "SHEET_READ_FAILED", str(e)))
        error_log.flush()
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(sheet, profile_name)

    options = ImportOptions(
        strict_enums=cfg.strict_enums,
        belt_substring_fallback=cfg.belt_substring_fallback,
        belt_qualifier=cfg.belt_qualifier,
    )
    logger.info(f"Importing {file_name} (sheet={sheet.sheet_name} profile={profile_name})")
    try:
        with _db_connection(cfg) as store:
            summary = import_batch(
                sheet,
                get_profile(profile_name),
                store,
                session_id=args.session_id,
                club_id=args.club_id,
                file_name=file_name,
                options=options,
                error_log=error_log,
                progress=True,
            )
    except BatchImportError as e:
        logger.error(f"import: {e}")
        error_log.append(ErrorRecord.create(file_name, sheet.sheet_name, -1, "BATCH_REJECTED", str(e)))
        error_log.flush()
        return EXIT_FATAL
    except StoreError as e:
        logger.error(f"database: {e}")
        return EXIT_FATAL

    for line in render_error_report(summary, cfg.error_display_limit):
        logger.info(line)
    written = error_log.flush()
    if written is not None:
        logger.info(f"error log: {written}")
    log_summary(render_summary_line(summary).removeprefix("SUMMARY "))

    if summary.failed > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
