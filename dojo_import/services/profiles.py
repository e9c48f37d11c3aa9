from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..models.entities import ExamSession
from ..models.fields import FieldSpec, LogicalField as F
from ..models.normalized_record import NormalizedRecord

"""Import profiles: the per-call-site configuration of the shared engine.

The exam-result sheet and the test-registration sheet go through the same
header resolver, row transformer and batch importer; what differs is data:
which logical fields to look for (and their header keywords), which of them
are required, the target table, its column names and its upsert key.
"""

__all__ = [
    "ImportProfile",
    "TEST_REGISTRATIONS",
    "EXAM_RESULTS",
    "PROFILES",
    "get_profile",
]


@dataclass(frozen=True)
class ImportProfile:
    """Per-call-site settings.

    Attributes:
        name: Profile key used by config and CLI
        table: Target table for imported rows
        field_specs: Logical fields with header keywords, in resolution priority
        columns: NormalizedRecord attribute -> table column
        member_column / session_column: upsert key columns
        required_fields: Fields that must resolve or the row is rejected
        component_fields: Logical score fields stored as component scores
        result_labels: Stored label per normalized result (None = store as is)
        insert_defaults: Column values applied to new records only
    """
    name: str
    table: str
    field_specs: tuple[FieldSpec, ...]
    columns: Mapping[str, str]
    member_column: str = "user_id"
    session_column: str = "test_id"
    required_fields: frozenset[F] = frozenset()
    component_fields: Mapping[F, str] = field(default_factory=dict)
    result_labels: Mapping[str, str] | None = None
    insert_defaults: Mapping[str, Any] = field(default_factory=dict)
    store_identity: bool = False  # copy member code / name onto the record

    @property
    def upsert_key(self) -> tuple[str, str]:
        return (self.member_column, self.session_column)

    @property
    def fields(self) -> frozenset[F]:
        return frozenset(s.field for s in self.field_specs)

    def uses(self, f: F) -> bool:
        return f in self.fields

    def key_for(self, record: NormalizedRecord, session: ExamSession) -> dict[str, Any]:
        return {self.member_column: record.member_id, self.session_column: session.id}

    def to_columns(self, record: NormalizedRecord) -> dict[str, Any]:
        """Present record values renamed to table columns."""
        values: dict[str, Any] = {}
        for attr, value in record.present_values().items():
            column = self.columns.get(attr)
            if column is None:
                continue
            if attr == "result" and self.result_labels is not None:
                value = self.result_labels.get(value, value)
            values[column] = value
        return values


# Header keywords, most specific first. Generic one-word keywords ("mã",
# "tên") come last so they only win when nothing more specific exists.
_MEMBER_CODE = FieldSpec(F.MEMBER_CODE, ("mã hội viên", "ma hoi vien", "mã hv", "ma hv", "member code", "mã", "code"))
_FULL_NAME = FieldSpec(F.FULL_NAME, ("họ và tên", "ho va ten", "họ tên", "ho ten", "full name", "tên", "name"))
_NOTES = FieldSpec(F.NOTES, ("ghi chú", "ghi chu", "chú thích", "notes", "note"))
_RESULT = FieldSpec(F.RESULT, ("kết quả", "ket qua", "kết quả thi", "result"))

TEST_REGISTRATIONS = ImportProfile(
    name="test_registrations",
    table="test_registrations",
    field_specs=(
        _MEMBER_CODE,
        _FULL_NAME,
        FieldSpec(F.CURRENT_BELT, ("cấp đai hiện tại", "cap dai hien tai", "đai hiện tại", "current belt")),
        FieldSpec(F.TARGET_BELT, ("cấp đai mục tiêu", "cap dai muc tieu", "đai mục tiêu", "target belt")),
        FieldSpec(F.SCORE, ("điểm", "diem", "điểm số", "score")),
        _RESULT,
        _NOTES,
    ),
    columns={
        "current_belt_id": "current_belt_id",
        "target_belt_id": "target_belt_id",
        "score": "score",
        "result": "test_result",
        "notes": "examiner_notes",
    },
    required_fields=frozenset({F.TARGET_BELT}),
    insert_defaults={"test_result": "pending", "payment_status": "paid"},
)

EXAM_RESULTS = ImportProfile(
    name="exam_results",
    table="ket_qua_thi",
    field_specs=(
        # club code first so the generic "code" keyword cannot take its column
        FieldSpec(F.CLUB_CODE, ("mã clb", "ma clb", "mã câu lạc bộ", "ma cau lac bo", "club code", "club")),
        FieldSpec(F.MEMBER_CODE, ("mã hội viên", "ma hoi vien", "mã hv", "ma hv", "member code", "code")),
        FieldSpec(F.FULL_NAME, ("họ và tên", "ho va ten", "họ tên", "ho ten", "full name", "tên", "name")),
        FieldSpec(F.TARGET_BELT, ("cấp đai dự thi", "cap dai du thi", "cấp đai", "cap dai", "belt level")),
        FieldSpec(F.EXAM_NUMBER, ("số thi", "so thi", "test number", "examination number")),
        FieldSpec(F.GENDER, ("giới tính", "gioi tinh", "gender", "sex")),
        FieldSpec(F.BIRTH_DATE, ("ntns", "ngày tháng năm sinh", "ngay thang nam sinh", "ngày sinh", "ngay sinh", "date of birth", "dob")),
        FieldSpec(F.POOMSAE_APPLICATION, ("phân thế bài quyền", "phan the bai quyen", "phân thế", "phan the")),
        FieldSpec(F.STANCE_TECHNIQUE, ("kỹ thuật tấn căn bản", "ky thuat tan can ban", "kỹ thuật tấn", "ky thuat tan")),
        FieldSpec(F.POWER_PRINCIPLES, ("nguyên tắc phát lực", "nguyen tac phat luc", "phát lực", "phat luc")),
        FieldSpec(F.HAND_BASICS, ("căn bản tay", "can ban tay")),
        FieldSpec(F.KICKING_TECHNIQUE, ("kỹ thuật chân", "ky thuat chan")),
        FieldSpec(F.SELF_DEFENSE, ("căn bản tự vệ", "can ban tu ve", "tự vệ", "tu ve")),
        FieldSpec(F.POOMSAE, ("bài quyền", "bai quyen", "quyền", "poomsae")),
        FieldSpec(F.SPARRING, ("song đấu", "song dau", "sparring")),
        FieldSpec(F.FITNESS, ("thể lực", "the luc", "fitness", "stamina")),
        _RESULT,
        _NOTES,
    ),
    columns={
        "member_code": "ma_hoi_vien",
        "full_name": "ho_va_ten",
        "club_code": "ma_clb",
        "target_belt_id": "cap_dai_du_thi_id",
        "exam_number": "so_thi",
        "gender": "gioi_tinh",
        "birth_date": "ngay_thang_nam_sinh",
        "stance_technique": "ky_thuat_tan_can_ban",
        "power_principles": "nguyen_tac_phat_luc",
        "hand_basics": "can_ban_tay",
        "kicking_technique": "ky_thuat_chan",
        "self_defense": "can_ban_tu_ve",
        "poomsae": "bai_quyen",
        "poomsae_application": "phan_the_bai_quyen",
        "sparring": "song_dau",
        "fitness": "the_luc",
        "result": "ket_qua",
        "notes": "ghi_chu",
    },
    component_fields={
        F.STANCE_TECHNIQUE: "stance_technique",
        F.POWER_PRINCIPLES: "power_principles",
        F.HAND_BASICS: "hand_basics",
        F.KICKING_TECHNIQUE: "kicking_technique",
        F.SELF_DEFENSE: "self_defense",
        F.POOMSAE: "poomsae",
        F.POOMSAE_APPLICATION: "poomsae_application",
        F.SPARRING: "sparring",
        F.FITNESS: "fitness",
    },
    result_labels={"pass": "Đạt", "fail": "Không đạt", "pending": "Chưa có kết quả"},
    insert_defaults={"ket_qua": "Chưa có kết quả"},
    store_identity=True,
)

PROFILES: dict[str, ImportProfile] = {p.name: p for p in (TEST_REGISTRATIONS, EXAM_RESULTS)}


def get_profile(name: str) -> ImportProfile:
    try:
        return PROFILES[name]
    except KeyError:
        raise ValueError(f"unknown import profile: {name!r} (known: {sorted(PROFILES)})") from None
