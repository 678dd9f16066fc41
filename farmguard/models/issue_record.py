from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from enum import Enum

"""ImportIssue model for the import issue log.

Every file-level failure, invalid row and advisory warning raised while
importing a CSV file becomes one ImportIssue, written as a JSON Lines record.
row=-1 is the sentinel for issues that are not tied to a specific row.
"""

__all__ = [
    "IssueSeverity",
    "ImportIssue",
]


class IssueSeverity(Enum):
    FILE = "FILE"  # whole file rejected
    ROW = "ROW"  # row kept but marked invalid
    WARNING = "WARNING"  # value defaulted or dropped, row still valid


@dataclass(frozen=True)
class ImportIssue:
    """Structured issue record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: CSV file name being imported
        row: Source line number (1-based). -1 when the row is unknown
        severity: FILE, ROW or WARNING
        message: Human-readable description
    """
    timestamp: str
    file: str
    row: int
    severity: str
    message: str

    @staticmethod
    def create(file: str, row: int, severity: IssueSeverity, message: str) -> ImportIssue:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ImportIssue(
            timestamp=ts,
            file=file,
            row=row,
            severity=severity.value,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
