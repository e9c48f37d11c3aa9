from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Protocol

from ..models.entities import BeltLevel, Member
from ..normalize.cells import normalize_text

"""Entity resolution: free text from a row -> existing member / belt level.

Both resolvers walk an ordered chain of lookup strategies. The first strategy
that yields exactly one candidate wins; zero candidates moves on to the next
strategy; several candidates count as "not found" for that strategy rather
than a guess. Resolvers return None instead of raising.
"""

__all__ = [
    "DEFAULT_BELT_QUALIFIER",
    "BeltStrategy",
    "BeltMatch",
    "BeltLevelIndex",
    "MemberLookup",
    "MemberStrategy",
    "MemberMatch",
    "resolve_member",
]

logger = logging.getLogger(__name__)

DEFAULT_BELT_QUALIFIER = "đai"

_WS_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"\d+")


def _key(text: str) -> str:
    return _WS_RE.sub(" ", normalize_text(text)).lower()


def _qualifier_pattern(qualifier: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(qualifier)}(?!\w)\s*")


def _unique(ids: Iterable[int] | None) -> int | None:
    if not ids:
        return None
    ids = set(ids)
    return next(iter(ids)) if len(ids) == 1 else None


class BeltStrategy(Enum):
    """Belt lookup strategies, in the order they are tried."""
    EXACT = 1
    QUALIFIER_STRIPPED = 2
    TOKEN = 3
    NUMERIC = 4
    SUBSTRING = 5


@dataclass(frozen=True)
class BeltMatch:
    belt_id: int
    strategy: BeltStrategy
    key: str  # index key that produced the hit

    @property
    def low_confidence(self) -> bool:
        return self.strategy is BeltStrategy.SUBSTRING


class BeltLevelIndex:
    """Read-only lookup tables over all known belt levels.

    Build once per batch with BeltLevelIndex.build(); the instance has no
    mutators and can be shared by concurrently running batches.

    Tables:
        names   full lowercase names, plus each name with the qualifier word
                ("đai") removed
        tokens  every whitespace token of every name except the qualifier
        numbers every digit run found in a name ("Đẳng 1" -> "1")
    """

    def __init__(
        self,
        names: Mapping[str, frozenset[int]],
        tokens: Mapping[str, frozenset[int]],
        numbers: Mapping[str, frozenset[int]],
        qualifier: str = DEFAULT_BELT_QUALIFIER,
        allow_substring: bool = True,
    ) -> None:
        self._names = MappingProxyType(dict(names))
        self._tokens = MappingProxyType(dict(tokens))
        self._numbers = MappingProxyType(dict(numbers))
        self._qualifier = _key(qualifier)
        self._qualifier_re = _qualifier_pattern(self._qualifier)
        self.allow_substring = allow_substring
        # every key in first-seen order, ids merged across tables
        merged: dict[str, set[int]] = {}
        for table in (self._names, self._tokens, self._numbers):
            for k, ids in table.items():
                merged.setdefault(k, set()).update(ids)
        self._scan = tuple((k, frozenset(v)) for k, v in merged.items())

    @classmethod
    def build(
        cls,
        belts: Iterable[BeltLevel],
        qualifier: str = DEFAULT_BELT_QUALIFIER,
        allow_substring: bool = True,
    ) -> BeltLevelIndex:
        q = _key(qualifier)
        q_re = _qualifier_pattern(q)
        names: dict[str, set[int]] = {}
        tokens: dict[str, set[int]] = {}
        numbers: dict[str, set[int]] = {}
        count = 0
        for belt in belts:
            count += 1
            full = _key(belt.name)
            if not full:
                continue
            names.setdefault(full, set()).add(belt.id)
            stripped = q_re.sub("", full).strip()
            if stripped and stripped != full:
                names.setdefault(stripped, set()).add(belt.id)
            for tok in full.split(" "):
                if tok and tok != q:
                    tokens.setdefault(tok, set()).add(belt.id)
            for num in _NUMBER_RE.findall(full):
                numbers.setdefault(num, set()).add(belt.id)
        logger.debug("belt index built belts=%d keys=%d", count, len(names) + len(tokens) + len(numbers))

        def _freeze(d: dict[str, set[int]]) -> dict[str, frozenset[int]]:
            return {k: frozenset(v) for k, v in d.items()}

        return cls(_freeze(names), _freeze(tokens), _freeze(numbers), qualifier, allow_substring)

    def strip_qualifier(self, key: str) -> str:
        return self._qualifier_re.sub("", key).strip()

    def resolve(self, name: str | None) -> BeltMatch | None:
        """Resolve a belt name cell to a belt id, or None when every strategy fails."""
        key = _key(name or "")
        if not key:
            return None

        found = _unique(self._names.get(key))
        if found is not None:
            return BeltMatch(found, BeltStrategy.EXACT, key)

        stripped = self.strip_qualifier(key)
        if stripped and stripped != key:
            found = _unique(self._names.get(stripped))
            if found is not None:
                return BeltMatch(found, BeltStrategy.QUALIFIER_STRIPPED, stripped)

        found = _unique(self._tokens.get(key))
        if found is not None:
            return BeltMatch(found, BeltStrategy.TOKEN, key)

        found = _unique(self._numbers.get(key))
        if found is not None:
            return BeltMatch(found, BeltStrategy.NUMERIC, key)

        if self.allow_substring:
            hits = [(k, ids) for k, ids in self._scan if k in key or key in k]
            found = _unique({i for _, ids in hits for i in ids})
            if found is not None:
                return BeltMatch(found, BeltStrategy.SUBSTRING, hits[0][0])
        return None


class MemberLookup(Protocol):
    """Point queries against the member store."""

    def find_members_by_code(self, code: str) -> Sequence[Member]: ...

    def find_members_by_name(self, name: str) -> Sequence[Member]: ...


class MemberStrategy(Enum):
    CODE = 1
    NAME = 2


@dataclass(frozen=True)
class MemberMatch:
    member: Member
    strategy: MemberStrategy


def resolve_member(code: str, name: str, lookup: MemberLookup) -> MemberMatch | None:
    """Find the member a row refers to.

    The member code is tried first; the full name is used when no code was
    given or the code did not identify exactly one member.
    """
    if code:
        hits = lookup.find_members_by_code(code)
        if len(hits) == 1:
            return MemberMatch(hits[0], MemberStrategy.CODE)
        if len(hits) > 1:
            logger.debug("member code=%r is ambiguous (%d hits)", code, len(hits))
    if name:
        hits = lookup.find_members_by_name(name)
        if len(hits) == 1:
            return MemberMatch(hits[0], MemberStrategy.NAME)
        if len(hits) > 1:
            logger.debug("member name=%r is ambiguous (%d hits)", name, len(hits))
    return None
