# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd  # type: ignore
import pytest

from dojo_import.db.memory import MemoryStore
from dojo_import.logging.init import reset_logging
from dojo_import.models.entities import BeltLevel, ExamSession, Member


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind to sys.stdout at setup time; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def belts() -> list[BeltLevel]:
    return [
        BeltLevel(id=1, name="Đai Trắng", order_sequence=1),
        BeltLevel(id=3, name="Đai Vàng", order_sequence=3),
        BeltLevel(id=5, name="Đai Xanh", order_sequence=5),
        BeltLevel(id=7, name="Đai Đỏ", order_sequence=7),
        BeltLevel(id=9, name="Đẳng 1", order_sequence=9),
    ]


@pytest.fixture()
def members() -> list[Member]:
    return [
        Member(id=42, code="HV001", full_name="Nguyễn Văn An", belt_id=3),
        Member(id=43, code="HV002", full_name="Trần Thị Bình", belt_id=1),
        Member(id=44, code="HV003", full_name="Lê Minh Châu", belt_id=5),
    ]


@pytest.fixture()
def store(belts, members) -> MemoryStore:
    return MemoryStore(belts=belts, members=members, sessions=[ExamSession(id=7, name="Kỳ thi Q2.2025")])


@pytest.fixture()
def sample_config_yaml() -> str:
    return """profile: test_registrations
error_display_limit: 5
strict_enums: false
belt_substring_fallback: true
error_log_dir: ./logs
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_excel():
    def _make(path: Path, rows: list[list[object]], sheet_name: str = "Sheet1") -> Path:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
        return path
    return _make
