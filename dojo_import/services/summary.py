from __future__ import annotations

from ..models.import_summary import DEFAULT_ERROR_DISPLAY_LIMIT, ImportSummary

"""Rendering of an ImportSummary for the console.

SUMMARY line format:
    SUMMARY file=<name> session=<id> imported=<n> failed=<n> skipped=<n> elapsed_sec=<s>
"""

__all__ = [
    "format_elapsed",
    "render_summary_line",
    "render_error_report",
]


def format_elapsed(seconds: float) -> str:
    """Format elapsed seconds without scientific notation or trailing zeros.

    Examples:
        >>> format_elapsed(2.0)
        '2'
        >>> format_elapsed(0.0001234)
        '0.000123'
    """
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(summary: ImportSummary) -> str:
    """Render the one-line SUMMARY for a finished batch.

    Examples:
        >>> s = ImportSummary(file_name="a.xlsx", imported=3, failed=1, errors=(), elapsed_seconds=2.0)
        >>> render_summary_line(s)
        'SUMMARY file=a.xlsx session=- imported=3 failed=1 skipped=0 elapsed_sec=2'
    """
    session = str(summary.session.id) if summary.session is not None else "-"
    return (
        f"SUMMARY file={summary.file_name or '-'} "
        f"session={session} "
        f"imported={summary.imported} "
        f"failed={summary.failed} "
        f"skipped={summary.skipped_blank} "
        f"elapsed_sec={format_elapsed(summary.elapsed_seconds)}"
    )


def render_error_report(summary: ImportSummary, limit: int = DEFAULT_ERROR_DISPLAY_LIMIT) -> list[str]:
    """Human readable report lines: totals, session info, then the first ``limit`` errors."""
    lines = [f"Imported {summary.imported} row(s), {summary.failed} failed"]
    if summary.inserted or summary.updated:
        lines.append(f"  new={summary.inserted} merged={summary.updated}")
    if summary.session is not None:
        state = "created" if summary.session_created else "existing"
        lines.append(f"  session: {summary.session.name} (id={summary.session.id}, {state})")
    if summary.low_confidence_rows:
        rows = ", ".join(str(r) for r in summary.low_confidence_rows)
        lines.append(f"  belt matched by partial name on row(s): {rows}")
    if summary.errors:
        lines.append("Errors:")
        lines.extend(f"  {line}" for line in summary.error_lines(limit))
    return lines
