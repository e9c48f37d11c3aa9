from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from unittest.mock import patch

from dojo_import.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL, main as cli_main

"""Exit code contract: 0 all rows imported, 2 some rows rejected, 1 fatal."""

HEADER = ["Mã hội viên", "Cấp đai mục tiêu"]


def _run(store, path: Path) -> int:
    @contextmanager
    def fake_connection(cfg):
        yield store

    with patch("dojo_import.cli.__main__._db_connection", fake_connection):
        return cli_main([str(path), "--session-id", "7"])


def test_exit_code_values():
    assert (EXIT_SUCCESS_ALL, EXIT_FATAL, EXIT_PARTIAL_FAILURE) == (0, 1, 2)


def test_exit_code_all_success(temp_workdir: Path, make_excel, store):
    path = make_excel(temp_workdir / "data" / "a.xlsx", [HEADER, ["HV001", "Xanh"], [None, None]])
    assert _run(store, path) == EXIT_SUCCESS_ALL


def test_exit_code_partial(temp_workdir: Path, make_excel, store):
    path = make_excel(temp_workdir / "data" / "a.xlsx", [HEADER, ["HV001", "Xanh"], ["HV001", ""]])
    assert _run(store, path) == EXIT_PARTIAL_FAILURE


def test_exit_code_every_row_rejected(temp_workdir: Path, make_excel, store):
    path = make_excel(temp_workdir / "data" / "a.xlsx", [HEADER, ["HV404", "Xanh"]])
    assert _run(store, path) == EXIT_PARTIAL_FAILURE


def test_exit_code_fatal_empty_sheet(temp_workdir: Path, make_excel, store):
    path = make_excel(temp_workdir / "data" / "a.xlsx", [HEADER])
    assert _run(store, path) == EXIT_FATAL
