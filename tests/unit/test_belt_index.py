from __future__ import annotations

import pytest

from dojo_import.models.entities import BeltLevel
from dojo_import.resolve.entities import BeltLevelIndex, BeltStrategy


@pytest.fixture()
def index(belts) -> BeltLevelIndex:
    return BeltLevelIndex.build(belts)


@pytest.mark.parametrize(
    "text, belt_id, strategy",
    [
        ("Đai Vàng", 3, BeltStrategy.EXACT),
        ("đai   xanh", 5, BeltStrategy.EXACT),
        ("Vàng", 3, BeltStrategy.EXACT),
        ("Đẳng 1", 9, BeltStrategy.EXACT),
        ("đẳng", 9, BeltStrategy.TOKEN),
        ("1", 9, BeltStrategy.TOKEN),
    ],
)
def test_resolution_chain(index, text, belt_id, strategy):
    match = index.resolve(text)
    assert match is not None
    assert match.belt_id == belt_id
    assert match.strategy is strategy
    assert match.low_confidence is False


def test_numeric_strategy_when_number_is_not_a_token():
    index = BeltLevelIndex.build([BeltLevel(id=11, name="Cấp 8/10"), BeltLevel(id=12, name="Đai Đen")])
    match = index.resolve("10")
    assert match is not None
    assert match.belt_id == 11
    assert match.strategy is BeltStrategy.NUMERIC


def test_qualifier_is_stripped_from_the_input():
    index = BeltLevelIndex.build([BeltLevel(id=4, name="Xanh lá")])
    match = index.resolve("Đai Xanh lá")
    assert match is not None
    assert match.belt_id == 4
    assert match.strategy is BeltStrategy.QUALIFIER_STRIPPED


def test_substring_match_is_low_confidence(index):
    match = index.resolve("Xanh lá cây")
    assert match is not None
    assert match.belt_id == 5
    assert match.strategy is BeltStrategy.SUBSTRING
    assert match.low_confidence is True


def test_substring_fallback_can_be_disabled(belts):
    index = BeltLevelIndex.build(belts, allow_substring=False)
    assert index.resolve("Xanh lá cây") is None


def test_exact_name_beats_longer_partial_name():
    index = BeltLevelIndex.build([BeltLevel(id=1, name="Đai Vàng Xanh"), BeltLevel(id=2, name="Vàng")])
    match = index.resolve("vàng")
    assert match is not None
    assert match.belt_id == 2
    assert match.strategy is BeltStrategy.EXACT


def test_ambiguous_token_is_not_a_match():
    index = BeltLevelIndex.build(
        [BeltLevel(id=1, name="Đai Xanh Dương"), BeltLevel(id=2, name="Đai Xanh Lá")],
        allow_substring=False,
    )
    assert index.resolve("xanh") is None


@pytest.mark.parametrize("text", [None, "", "   ", "Đai Tím"])
def test_unresolvable_text(index, text):
    assert index.resolve(text) is None


def test_custom_qualifier():
    index = BeltLevelIndex.build([BeltLevel(id=2, name="Belt Yellow")], qualifier="belt")
    match = index.resolve("yellow")
    assert match is not None
    assert match.belt_id == 2


def test_index_is_read_only(index):
    with pytest.raises(TypeError):
        index._names["new"] = frozenset({1})  # type: ignore[index]


def test_substring_scan_does_not_guess_between_belts():
    index = BeltLevelIndex.build([BeltLevel(id=2, name="Đai Đen 1 Đẳng"), BeltLevel(id=3, name="Đai Đen 2 Đẳng")])
    assert index.resolve("đen") is None
    assert index.resolve("đen đẳng") is None


def test_qualifier_stripped_beats_shared_token():
    index = BeltLevelIndex.build([BeltLevel(id=4, name="Xanh"), BeltLevel(id=6, name="Đai Xanh Dương")])
    match = index.resolve("Đai Xanh")
    assert match is not None
    assert match.belt_id == 4
    assert match.strategy is BeltStrategy.QUALIFIER_STRIPPED


def test_token_beats_substring_of_another_belt():
    index = BeltLevelIndex.build([BeltLevel(id=1, name="Cấp 10"), BeltLevel(id=2, name="Cấp 8/10")])
    match = index.resolve("10")
    assert match is not None
    assert match.belt_id == 1
    assert match.strategy is BeltStrategy.TOKEN
