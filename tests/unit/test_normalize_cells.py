from __future__ import annotations

from datetime import date, datetime

import pytest

from dojo_import.normalize.cells import (
    EXCEL_EPOCH,
    GENDER_SPEC,
    RESULT_SPEC,
    match_enum,
    normalize_date,
    normalize_enum,
    normalize_score,
    normalize_text,
)


@pytest.mark.parametrize(
    "cell, expected",
    [
        (None, ""),
        ("  HV001 ", "HV001"),
        (85.0, "85"),
        (8.5, "8.5"),
        (12, "12"),
        (True, "1"),
        (float("nan"), ""),
        (date(2024, 3, 15), "2024-03-15"),
        (datetime(2024, 3, 15, 8, 30), "2024-03-15"),
    ],
)
def test_normalize_text(cell, expected):
    assert normalize_text(cell) == expected


def test_normalize_text_composes_decomposed_vietnamese():
    decomposed = "Nguye\u0302\u0303n"
    assert normalize_text(decomposed) == "Nguyễn"


def test_serial_date_maps_to_calendar_date():
    assert normalize_date(45366) == date(2024, 3, 15)
    assert normalize_date(45366.75) == date(2024, 3, 15)
    assert normalize_date("45366") == date(2024, 3, 15)


def test_serial_date_round_trip():
    d = date(2024, 3, 15)
    serial = (d - EXCEL_EPOCH).days
    assert normalize_date(serial) == d


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2024-03-15", date(2024, 3, 15)),
        ("2024/3/5", date(2024, 3, 5)),
        ("2024-03-15T08:00:00", date(2024, 3, 15)),
        ("15/03/2024", date(2024, 3, 15)),
        ("15-03-2024", date(2024, 3, 15)),
        ("05/03/2024 08:00", date(2024, 3, 5)),
    ],
)
def test_text_dates(text, expected):
    assert normalize_date(text) == expected


@pytest.mark.parametrize("cell", [None, "", "   ", "not a date", "31/02/2024", "15/03/24", True, -1])
def test_unparseable_dates_are_absent(cell):
    assert normalize_date(cell) is None


def test_date_and_datetime_cells_pass_through():
    assert normalize_date(date(2020, 1, 2)) == date(2020, 1, 2)
    assert normalize_date(datetime(2020, 1, 2, 23, 59)) == date(2020, 1, 2)


@pytest.mark.parametrize(
    "cell, expected",
    [
        (85, 85.0),
        (7.5, 7.5),
        ("85", 85.0),
        (" 9.25 ", 9.25),
        ("8,5", 8.5),
    ],
)
def test_normalize_score(cell, expected):
    assert normalize_score(cell) == expected


@pytest.mark.parametrize("cell", [None, "", "abc", "1,2,3", "inf", float("nan"), True, date(2024, 1, 1)])
def test_non_numeric_scores_are_absent(cell):
    assert normalize_score(cell) is None


def test_zero_score_is_not_absent():
    assert normalize_score(0) == 0.0
    assert normalize_score("0") == 0.0


@pytest.mark.parametrize(
    "cell, expected",
    [
        ("Đạt", "pass"),
        ("dat", "pass"),
        ("PASS", "pass"),
        ("Không đạt", "fail"),
        ("khong dat", "fail"),
        ("Chưa đạt", "fail"),
        ("Trượt", "fail"),
        ("Chưa có kết quả", "pending"),
        ("pending", "pending"),
    ],
)
def test_result_keywords(cell, expected):
    assert match_enum(cell, RESULT_SPEC) == expected


def test_result_unrecognized_falls_back_to_default():
    assert match_enum("???", RESULT_SPEC) is None
    assert normalize_enum("???", RESULT_SPEC) == "pending"
    assert normalize_enum(None, RESULT_SPEC) == "pending"


@pytest.mark.parametrize(
    "cell, expected",
    [("Nữ", "Nữ"), ("nu", "Nữ"), ("Female", "Nữ"), ("Nam", "Nam"), ("male", "Nam"), ("x", "Nam")],
)
def test_gender(cell, expected):
    assert normalize_enum(cell, GENDER_SPEC) == expected


def test_enum_values_include_default():
    assert set(RESULT_SPEC.values) == {"pass", "fail", "pending"}
