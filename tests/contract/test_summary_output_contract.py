from __future__ import annotations

import re
from pathlib import Path

from dojo_import.models.import_summary import ImportSummary
from dojo_import.services.summary import render_summary_line

"""SUMMARY line format contract."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+file=(\S.*?)\s+session=([0-9]+|-)\s+imported=([0-9]+)\s+failed=([0-9]+)\s+"
    r"skipped=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def test_summary_pattern_example_line():
    line = "SUMMARY file=dang_ky.xlsx session=7 imported=12 failed=1 skipped=0 elapsed_sec=0.84"
    assert SUMMARY_PATTERN.match(line)


def test_rendered_line_matches_contract():
    s = ImportSummary(file_name="ket qua.xlsx", imported=0, failed=0, errors=(), elapsed_seconds=0.0001)
    m = SUMMARY_PATTERN.match(render_summary_line(s))
    assert m, "rendered SUMMARY line should match contract regex"
    assert m.group(1) == "ket qua.xlsx"
    assert m.group(2) == "-"


def test_cli_summary_line_matches_contract(temp_workdir: Path, make_excel, store, capsys):
    from contextlib import contextmanager
    from unittest.mock import patch

    from dojo_import.cli.__main__ import main as cli_main

    @contextmanager
    def fake_connection(cfg):
        yield store

    path = make_excel(
        temp_workdir / "data" / "a.xlsx",
        [["Mã hội viên", "Cấp đai mục tiêu"], ["HV001", "Xanh"], ["HV999", "Xanh"]],
    )
    with patch("dojo_import.cli.__main__._db_connection", fake_connection):
        cli_main([str(path), "--session-id", "7"])
    lines = [ln for ln in capsys.readouterr().out.splitlines() if ln.startswith("SUMMARY")]
    assert len(lines) == 1
    m = SUMMARY_PATTERN.match(lines[0])
    assert m
    assert m.group(3, 4) == ("1", "1")
