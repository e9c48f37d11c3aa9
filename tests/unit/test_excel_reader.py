from __future__ import annotations

from datetime import datetime
from pathlib import Path

import numpy as np
import pandas as pd  # type: ignore
import pytest

from dojo_import.excel.reader import DecodedSheet, SheetReadError, decode_frame, read_sheet


def test_from_rows_splits_header():
    sheet = DecodedSheet.from_rows([["Mã hội viên", "Điểm"], ["HV001", 85]], sheet_name="S")
    assert sheet.header_row == ("Mã hội viên", "Điểm")
    assert sheet.data_rows == (("HV001", 85),)
    assert sheet.width == 2


def test_decode_frame_converts_scalars():
    df = pd.DataFrame(
        [
            ["Mã", "Điểm", "Ngày"],
            ["HV001", np.int64(85), pd.Timestamp("2024-03-15")],
            ["HV002", np.nan, pd.NaT],
        ],
        dtype=object,
    )
    sheet = decode_frame(df)
    row1, row2 = sheet.data_rows
    assert row1 == ("HV001", 85, datetime(2024, 3, 15))
    assert type(row1[1]) is int
    assert row2 == ("HV002", None, None)


def test_read_xlsx(tmp_path: Path, make_excel):
    path = make_excel(tmp_path / "dang_ky.xlsx", [["Mã hội viên", "Điểm", "Ghi chú"], ["HV001", 85, "NA"]], "Đợt 1")
    sheet = read_sheet(path)
    assert sheet.sheet_name == "Đợt 1"
    assert sheet.source_name == "dang_ky.xlsx"
    assert sheet.header_row == ("Mã hội viên", "Điểm", "Ghi chú")
    assert sheet.data_rows[0][0] == "HV001"
    assert sheet.data_rows[0][1] == 85
    # NA strings are data, not missing values
    assert sheet.data_rows[0][2] == "NA"


def test_read_csv(tmp_path: Path):
    path = tmp_path / "ket qua.csv"
    path.write_text("Mã hội viên,Kết quả\nHV001,Đạt\nHV002,\n", encoding="utf-8")
    sheet = read_sheet(path)
    assert sheet.header_row == ("Mã hội viên", "Kết quả")
    assert sheet.data_rows == (("HV001", "Đạt"), ("HV002", None))


def test_missing_file(tmp_path: Path):
    with pytest.raises(SheetReadError):
        read_sheet(tmp_path / "nope.xlsx")


def test_missing_sheet(tmp_path: Path, make_excel):
    path = make_excel(tmp_path / "a.xlsx", [["Mã hội viên"], ["HV001"]])
    with pytest.raises(SheetReadError) as e:
        read_sheet(path, "Other")
    assert "Other" in str(e.value)


def test_not_a_workbook(tmp_path: Path):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a zip file")
    with pytest.raises(SheetReadError):
        read_sheet(path)
