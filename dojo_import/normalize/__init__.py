from .cells import (
    GENDER_SPEC,
    RESULT_SPEC,
    EnumSpec,
    match_enum,
    normalize_date,
    normalize_enum,
    normalize_score,
    normalize_text,
)

__all__ = [
    "EnumSpec",
    "GENDER_SPEC",
    "RESULT_SPEC",
    "match_enum",
    "normalize_date",
    "normalize_enum",
    "normalize_score",
    "normalize_text",
]
