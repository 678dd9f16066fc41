from __future__ import annotations

import json
from pathlib import Path

from farmguard.cli import main as cli_main
from farmguard.logging.init import reset_logging

"""Partial failure: one bad file among good ones still imports the good ones."""


def test_partial_failure_keeps_good_files(write_config, temp_workdir: Path, capsys):
    imports = temp_workdir / "imports"
    good = imports / "good.csv"
    good.write_text("Part Name,Part Number,Quantity\nFilter,RE1,2\n", encoding="utf-8")
    empty = imports / "empty.csv"
    empty.write_text("\n\n", encoding="utf-8")
    invalid_only = imports / "invalid.csv"
    invalid_only.write_text("Part Name,Part Number\n,RE9\n", encoding="utf-8")

    reset_logging()
    code = cli_main(["import-parts", str(good), str(empty), str(invalid_only)])
    out = capsys.readouterr().out

    assert code == 2
    assert "SUMMARY files=3 success=1 failed=2" in out
    assert "ERROR empty.csv: file is empty" in out
    assert "ERROR invalid.csv: no valid rows" in out
    assert "WARN invalid.csv: Row 2: Part name is required" in out

    stored = json.loads((temp_workdir / "data" / "farmguard_consumables.json").read_text(encoding="utf-8"))
    assert [c["part_number"] for c in stored] == ["RE1"]
