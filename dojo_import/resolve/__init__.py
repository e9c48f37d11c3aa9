from .entities import (
    BeltLevelIndex,
    BeltMatch,
    BeltStrategy,
    MemberLookup,
    MemberMatch,
    MemberStrategy,
    resolve_member,
)
from .headers import normalize_header, resolve_headers

__all__ = [
    "BeltLevelIndex",
    "BeltMatch",
    "BeltStrategy",
    "MemberLookup",
    "MemberMatch",
    "MemberStrategy",
    "normalize_header",
    "resolve_headers",
    "resolve_member",
]
