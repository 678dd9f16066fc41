from __future__ import annotations

from dataclasses import dataclass

"""RawRow model for the CSV import pipeline.

A RawRow is one tokenized CSV record: its cells in column order plus the
1-based source line number (the header is line 1, so data rows start at 2).
It is produced by the tokenizer and consumed immediately by the row parser.
"""

__all__ = [
    "RawRow",
]


@dataclass(frozen=True)
class RawRow:
    """Ordered string cells of a single CSV record."""
    line_number: int  # 1-based, counted over non-blank lines
    cells: tuple[str, ...]

    def cell(self, index: int) -> str:
        """Return the cell at `index`, or "" when the column is absent (-1) or the row is short."""
        if index < 0 or index >= len(self.cells):
            return ""
        return self.cells[index].strip()
