from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.import_result import ImportResult

"""Import progress bar with tqdm (TTY only).

One bar per import run, one tick per CSV file. The postfix carries running
totals for the run (files imported, files failed, rows read) so a long batch
shows how it is going before the SUMMARY line. Without a terminal, or with a
single file, no bar is created and only the counters are kept.
"""

__all__ = [
    "ImportProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ImportProgress:
    def __init__(self, total_files: int, *, kind: str = "parts") -> None:
        self.total_files = total_files
        self.description = f"Importing {kind}"
        self.imported = 0
        self.failed = 0
        self.rows = 0

        self.pbar: TqdmType[Any] | None = None
        if is_tty_enabled() and total_files > 1:
            self.pbar = tqdm(
                total=total_files,
                desc=self.description,
                unit="file",
                leave=True,
                ncols=80,
                ascii=True,
            )

    @property
    def enabled(self) -> bool:
        return self.pbar is not None

    def start_file(self, file_path: Path) -> None:
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def file_done(self, result: ImportResult) -> None:
        if result.success:
            self.imported += 1
        else:
            self.failed += 1
        self.rows += result.total_rows

        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)
            self.pbar.set_postfix(ok=self.imported, failed=self.failed, rows=self.rows)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ImportProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
