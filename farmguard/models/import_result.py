from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Import result models.

ImportResult describes a single CSV file run through the pipeline;
ImportRunResult aggregates every file of one CLI invocation and feeds the
SUMMARY line.
"""

__all__ = [
    "ImportResult",
    "ImportRunResult",
]


@dataclass(frozen=True)
class ImportResult:
    """Per-file import statistics."""
    file_name: str
    kind: str  # parts | equipment
    success: bool
    total_rows: int  # parsed data rows, valid or not
    valid_rows: int
    invalid_rows: int
    warnings: int
    merged_rows: int = 0  # source rows folded into another record
    imported: int = 0  # records written to storage (0 on dry runs)
    elapsed_seconds: float = 0.0
    error: str | None = None  # file-level failure reason


@dataclass(frozen=True)
class ImportRunResult:
    """Aggregated results for one invocation."""
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_results: list[ImportResult]

    @property
    def success_files(self) -> int:
        return sum(1 for r in self.file_results if r.success)

    @property
    def failed_files(self) -> int:
        return sum(1 for r in self.file_results if not r.success)

    @property
    def total_rows(self) -> int:
        return sum(r.total_rows for r in self.file_results)

    @property
    def valid_rows(self) -> int:
        return sum(r.valid_rows for r in self.file_results)

    @property
    def invalid_rows(self) -> int:
        return sum(r.invalid_rows for r in self.file_results)

    @property
    def warnings(self) -> int:
        return sum(r.warnings for r in self.file_results)

    @property
    def merged_rows(self) -> int:
        return sum(r.merged_rows for r in self.file_results)

    @property
    def imported(self) -> int:
        return sum(r.imported for r in self.file_results)
