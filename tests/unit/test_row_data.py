from __future__ import annotations

import pytest

from farmguard.models.row_data import RawRow


def test_cell_returns_trimmed_value():
    row = RawRow(line_number=2, cells=("Filter", " RE1 "))
    assert row.cell(0) == "Filter"
    assert row.cell(1) == "RE1"


@pytest.mark.parametrize("index", [-1, 2, 10])
def test_cell_absent_column_or_short_row_is_empty(index):
    row = RawRow(line_number=3, cells=("Filter", "RE1"))
    assert row.cell(index) == ""
