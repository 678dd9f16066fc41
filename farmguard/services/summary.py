from __future__ import annotations

from ..models.import_result import ImportRunResult

"""SUMMARY line rendering for import runs."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    # avoid scientific notation for very fast runs
    return f"{value:.3f}".rstrip("0").rstrip(".") or "0"


def render_summary_line(result: ImportRunResult) -> str:
    """Render the SUMMARY line of an import run.

    Format:
    SUMMARY files={n} success={s} failed={f} rows={r} valid={v} invalid={i}
    warnings={w} merged={m} imported={k} elapsed_sec={e}

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> render_summary_line(ImportRunResult(t, t, 0.0, []))
        'SUMMARY files=0 success=0 failed=0 rows=0 valid=0 invalid=0 warnings=0 merged=0 imported=0 elapsed_sec=0'
    """
    return (
        f"SUMMARY files={len(result.file_results)} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_rows} "
        f"valid={result.valid_rows} "
        f"invalid={result.invalid_rows} "
        f"warnings={result.warnings} "
        f"merged={result.merged_rows} "
        f"imported={result.imported} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
