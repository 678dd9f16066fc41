from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.issue_record import ImportIssue

"""Import issue log buffering.

Issues collected during a run are kept in memory and written as JSON Lines to
``<log_directory>/import-issues-YYYYMMDD-HHMMSS.log`` (UTC) on flush. The file
name is fixed on first access, so repeated flushes append to the same file.
Single-threaded use only.
"""

__all__ = [
    "ImportIssue",
    "IssueLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class IssueLogBuffer:
    """In-memory buffer for import issues. Flush writes JSON Lines."""

    def __init__(self, log_directory: Path | None = None) -> None:
        self._records: list[ImportIssue] = []
        self._directory = log_directory or LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._directory.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._directory / f"import-issues-{stamp}.log"
        return self._file_path

    def append(self, record: ImportIssue) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path:
        fp = self.file_path
        if not self._records:
            return fp
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
