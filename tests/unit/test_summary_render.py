from __future__ import annotations

import doctest
import re
from datetime import datetime, timezone

import farmguard.services.summary as summary_module
from farmguard.models.import_result import ImportResult, ImportRunResult
from farmguard.services.summary import render_summary_line

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY files=(\d+) success=(\d+) failed=(\d+) rows=(\d+) valid=(\d+) "
    r"invalid=(\d+) warnings=(\d+) merged=(\d+) imported=(\d+) elapsed_sec=(\d+(?:\.\d+)?)$"
)

START = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def _result(name: str, success: bool = True, **kw) -> ImportResult:
    base = dict(total_rows=3, valid_rows=2, invalid_rows=1, warnings=1, merged_rows=1, imported=2)
    base.update(kw)
    return ImportResult(file_name=name, kind="parts", success=success, **base)


def test_render_summary_line_aggregates_files():
    end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
    result = ImportRunResult(
        start_time=START,
        end_time=end,
        elapsed_seconds=2.0,
        file_results=[
            _result("a.csv"),
            _result("b.csv", success=False, total_rows=0, valid_rows=0, invalid_rows=0,
                    warnings=0, merged_rows=0, imported=0, error="File is empty"),
        ],
    )
    line = render_summary_line(result)
    m = SUMMARY_PATTERN.match(line)
    assert m, line
    assert m.groups() == ("2", "1", "1", "3", "2", "1", "1", "1", "2", "2")


def test_render_summary_line_fractional_seconds():
    result = ImportRunResult(START, START, 0.1234567, [])
    assert render_summary_line(result).endswith("elapsed_sec=0.123")


def test_render_summary_line_doctest():
    failures, _ = doctest.testmod(summary_module)
    assert failures == 0
