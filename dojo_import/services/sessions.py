from __future__ import annotations

import logging
import re
import unicodedata
from pathlib import PurePath

from ..db.base import ImportStore
from ..models.entities import ExamSession
from .errors import SessionNotFoundError

"""Exam session (parent grouping entity) selection for a batch.

When the caller does not name a session, one is derived from the source file
name and looked up or created once, before any row is processed. All rows
of the batch then share it.

    "KẾT QUẢ THI Q3.2025..xlsx" -> "Kỳ thi Q3.2025"
    "ket qua thi 2024.xlsx"     -> "Kỳ thi 2024"
    "Thi lên đai tháng 5.xlsx"  -> "Thi lên đai tháng 5"
"""

__all__ = [
    "DEFAULT_SESSION_NAME",
    "SessionNotFoundError",
    "derive_session_name",
    "resolve_session",
]

logger = logging.getLogger(__name__)

DEFAULT_SESSION_NAME = "Kỳ thi thăng cấp"
SESSION_NAME_MAX = 100  # ky_thi_thang_cap.test_name length

_EXTENSION_RE = re.compile(r"\.(xlsx|xlsm|xls|csv)$", re.IGNORECASE)
_QUARTER_RE = re.compile(r"(?<![A-Za-z0-9])Q([1-4])\.?(\d{4})(?!\d)", re.IGNORECASE)
_YEAR_RE = re.compile(r"(?<!\d)(\d{4})(?!\d)")
_WS_RE = re.compile(r"\s+")


def _sanitize(stem: str) -> str:
    text = unicodedata.normalize("NFC", stem).replace("_", " ")
    text = _WS_RE.sub(" ", text).strip(" .-")
    return text[:SESSION_NAME_MAX].rstrip()


def derive_session_name(file_name: str | None) -> str:
    """Deterministic session name for a source file.

    Quarter code (Q1-Q4 followed by a year) wins over a bare four-digit year,
    which wins over the sanitized file name itself.
    """
    if not file_name:
        return DEFAULT_SESSION_NAME
    stem = _EXTENSION_RE.sub("", PurePath(file_name).name).strip()
    m = _QUARTER_RE.search(stem)
    if m:
        return f"Kỳ thi Q{m.group(1)}.{m.group(2)}"
    m = _YEAR_RE.search(stem)
    if m:
        return f"Kỳ thi {m.group(1)}"
    return _sanitize(stem) or DEFAULT_SESSION_NAME


def resolve_session(
    store: ImportStore,
    session_id: int | None = None,
    file_name: str | None = None,
    club_id: int | None = None,
) -> tuple[ExamSession, bool]:
    """Return (session, created).

    Raises:
        SessionNotFoundError: session_id was given but is unknown to the store
    """
    if session_id is not None:
        session = store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"exam session {session_id} not found")
        logger.info("using exam session %s (id=%d)", session.name, session.id)
        return session, False

    name = derive_session_name(file_name)
    session = store.find_session_by_name(name)
    if session is not None:
        logger.info("using existing exam session %s (id=%d)", session.name, session.id)
        return session, False
    session = store.create_session(name, club_id)
    logger.info("created exam session %s (id=%d)", session.name, session.id)
    return session, True
