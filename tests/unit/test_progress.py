from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock, patch

from farmguard.models.import_result import ImportResult
from farmguard.services.progress import ImportProgress, is_tty_enabled


def _result(name: str, success: bool, rows: int) -> ImportResult:
    return ImportResult(
        file_name=name,
        kind="parts",
        success=success,
        total_rows=rows,
        valid_rows=rows if success else 0,
        invalid_rows=0 if success else rows,
        warnings=0,
    )


def test_is_tty_enabled_returns_stdout_isatty():
    with patch("sys.stdout.isatty", return_value=True):
        assert is_tty_enabled() is True
    with patch("sys.stdout.isatty", return_value=False):
        assert is_tty_enabled() is False


@patch("farmguard.services.progress.is_tty_enabled", return_value=False)
def test_progress_without_tty_still_counts(mock_tty):
    progress = ImportProgress(3)
    assert progress.enabled is False
    progress.start_file(Path("a.csv"))
    progress.file_done(_result("a.csv", True, 4))
    progress.file_done(_result("b.csv", False, 2))
    progress.close()
    assert (progress.imported, progress.failed, progress.rows) == (1, 1, 6)


@patch("farmguard.services.progress.is_tty_enabled", return_value=True)
def test_progress_single_file_has_no_bar(mock_tty):
    assert ImportProgress(1).enabled is False


@patch("farmguard.services.progress.tqdm")
@patch("farmguard.services.progress.is_tty_enabled", return_value=True)
def test_progress_drives_tqdm_with_running_totals(mock_tty, mock_tqdm):
    bar = Mock()
    mock_tqdm.return_value = bar

    with ImportProgress(2, kind="equipment") as progress:
        assert progress.enabled is True
        mock_tqdm.assert_called_once()
        assert mock_tqdm.call_args.kwargs["total"] == 2
        assert mock_tqdm.call_args.kwargs["unit"] == "file"

        progress.start_file(Path("/tmp/fleet.csv"))
        bar.set_description.assert_called_with("Importing equipment (fleet.csv)")
        progress.file_done(_result("fleet.csv", True, 3))
        bar.update.assert_called_with(1)
        bar.set_postfix.assert_called_with(ok=1, failed=0, rows=3)

        progress.file_done(_result("broken.csv", False, 0))
        bar.set_postfix.assert_called_with(ok=1, failed=1, rows=3)

    bar.close.assert_called_once()
    assert progress.enabled is False
