from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from ..models.fields import FieldSpec
from ..models.header_map import HeaderMap
from ..models.raw_row import Cell
from ..normalize.cells import normalize_text

"""Header discovery: declared header row -> HeaderMap.

Matching is case-insensitive and whitespace-tolerant but deliberately
diacritic-sensitive: the vocabulary is bilingual Vietnamese/English and
folding diacritics would make unrelated words collide.
"""

__all__ = [
    "normalize_header",
    "resolve_headers",
]

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")


def normalize_header(cell: Cell) -> str:
    """Trim, collapse internal whitespace and lowercase a header cell."""
    return _WS_RE.sub(" ", normalize_text(cell)).lower()


def _find_column(headers: Sequence[str], keywords: Iterable[str], claimed: set[int]) -> int | None:
    for keyword in keywords:
        kw = normalize_header(keyword)
        if not kw:
            continue
        for idx, h in enumerate(headers):
            if idx not in claimed and h == kw:
                return idx
        for idx, h in enumerate(headers):
            if idx not in claimed and kw in h:
                return idx
    return None


def resolve_headers(header_row: Sequence[Cell], field_specs: Sequence[FieldSpec]) -> HeaderMap:
    """Bind logical fields to column indices.

    Fields are resolved in declaration order; for each keyword an exact match
    is preferred over a substring match, and a column claimed by an earlier
    field is never handed to a later one. Unmatched fields are simply left
    out of the map.
    """
    headers = [normalize_header(c) for c in header_row]
    claimed: set[int] = set()
    columns = {}
    for spec in field_specs:
        if spec.field in columns:
            continue
        idx = _find_column(headers, spec.keywords, claimed)
        if idx is None:
            logger.debug("header field=%s not found", spec.field.value)
            continue
        columns[spec.field] = idx
        claimed.add(idx)
        logger.debug("header field=%s column=%d header=%r", spec.field.value, idx + 1, headers[idx])
    return HeaderMap(columns=columns)
