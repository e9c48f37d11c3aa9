from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Row progress display with tqdm (TTY only).

A single tqdm bar per batch. In non-TTY environments (CI, redirected output)
the bar is never created so no control sequences end up in logs.
"""

__all__ = [
    "RowProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class RowProgressTracker:
    """Per-row progress bar for one import batch.

    Disabled entirely when ``enabled`` is False or stdout is not a TTY.
    """

    def __init__(self, total_rows: int, *, enabled: bool = True, description: str = "Importing rows") -> None:
        self.total_rows = total_rows
        self.description = description
        self.current_row = 0

        self.enabled = enabled and is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, **stats: Any) -> None:
        """Mark one row done; ``stats`` are shown as the bar postfix."""
        self.current_row += 1
        if self.pbar is not None:
            self.pbar.update(1)
            if stats:
                self.pbar.set_postfix(**stats)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> RowProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
