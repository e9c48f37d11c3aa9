from __future__ import annotations

from datetime import date

import pytest

from dojo_import.models.entities import ExamSession
from dojo_import.models.fields import FieldSpec, LogicalField as F
from dojo_import.models.normalized_record import NormalizedRecord
from dojo_import.services.profiles import EXAM_RESULTS, PROFILES, TEST_REGISTRATIONS, get_profile


def test_profiles_registry():
    assert set(PROFILES) == {"test_registrations", "exam_results"}
    assert get_profile("exam_results") is EXAM_RESULTS
    with pytest.raises(ValueError):
        get_profile("attendance")


def test_upsert_key():
    rec = NormalizedRecord(row_number=2, member_id=42)
    assert TEST_REGISTRATIONS.upsert_key == ("user_id", "test_id")
    assert TEST_REGISTRATIONS.key_for(rec, ExamSession(id=7, name="x")) == {"user_id": 42, "test_id": 7}


def test_registration_columns_skip_absent_values():
    rec = NormalizedRecord(row_number=2, member_id=42, target_belt_id=5, result="fail", notes=None)
    assert TEST_REGISTRATIONS.to_columns(rec) == {"target_belt_id": 5, "test_result": "fail"}


def test_exam_columns_use_labels_and_component_names():
    rec = NormalizedRecord(
        row_number=2,
        member_id=43,
        member_code="HV002",
        result="pending",
        birth_date=date(2010, 5, 1),
        component_scores={"sparring": 8.0},
    )
    assert EXAM_RESULTS.to_columns(rec) == {
        "ma_hoi_vien": "HV002",
        "ket_qua": "Chưa có kết quả",
        "ngay_thang_nam_sinh": date(2010, 5, 1),
        "song_dau": 8.0,
    }


def test_required_fields():
    assert F.TARGET_BELT in TEST_REGISTRATIONS.required_fields
    assert TEST_REGISTRATIONS.uses(F.CURRENT_BELT)
    assert not EXAM_RESULTS.uses(F.CURRENT_BELT)


def test_field_spec_needs_keywords():
    with pytest.raises(ValueError):
        FieldSpec(F.SCORE, ())
