from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from farmguard.cli import main as cli_main
from farmguard.config.loader import load_config
from farmguard.logging.init import reset_logging
from farmguard.storage import FarmRepository, JsonFileStore

"""End-to-end run: equipment import, parts import matched against it, exports."""


@pytest.fixture()
def seeded_config(temp_workdir: Path) -> Path:
    cfg = temp_workdir / "config" / "farmguard.yml"
    cfg.write_text(
        "data_directory: ./data\nexport_directory: ./exports\nlog_directory: ./logs\n"
        "seed_default_intervals: true\n",
        encoding="utf-8",
    )
    return cfg


def _cli(argv: list[str], capsys) -> tuple[int, str]:
    reset_logging()
    code = cli_main(argv)
    return code, capsys.readouterr().out


def test_full_import_and_export_run(
    seeded_config: Path, equipment_csv_file: Path, temp_workdir: Path, capsys
):
    code, out = _cli(["import-equipment", str(equipment_csv_file)], capsys)
    assert code == 0
    assert "SUMMARY files=1 success=1 failed=0 rows=2 valid=2 invalid=0 warnings=0" in out

    parts = temp_workdir / "imports" / "parts.csv"
    parts.write_text(
        "Part Name,Part Number,Category,Supplier,Quantity,Low Stock Threshold,Equipment,Notes\n"
        'Engine Oil Filter,RE504836,filter,John Deere,5,2,"8R Tractor, Baler",first batch\n'
        "Engine Oil Filter,re504836,Filters,NAPA,3,2,S780 Combine,second batch\n"
        "Fan Belt,R503581,belts,,1,2,combine,\n",
        encoding="utf-8",
    )
    code, out = _cli(["import-parts", str(parts)], capsys)
    assert code == 0
    assert 'Part #RE504836: Equipment not found: "Baler"' in out
    assert "Part #RE504836: Merged 2 duplicate rows (rows 2, 3)" in out
    assert re.search(r"^SUMMARY .*merged=1 imported=2 ", out, re.MULTILINE)

    cfg = load_config(seeded_config)
    repository = FarmRepository(JsonFileStore(cfg.data_directory))
    equipment = {e.name: e.id for e in repository.list_equipment()}
    consumables = {c.part_number: c for c in repository.list_consumables()}

    oil_filter = consumables["RE504836"]
    assert oil_filter.quantity == 8
    assert oil_filter.supplier == "John Deere"
    assert oil_filter.notes == "first batch; second batch"
    assert oil_filter.compatible_equipment == [equipment["8R Tractor"], equipment["S780 Combine"]]
    assert consumables["R503581"].compatible_equipment == [equipment["S780 Combine"]]
    assert consumables["R503581"].is_low_stock

    # default schedule seeded for each imported machine
    assert len(repository.intervals_for_equipment(equipment["8R Tractor"])) == 8

    code, out = _cli(["export", "parts", "--format", "html", "--output", "exports/report.html"], capsys)
    assert code == 0
    html = (temp_workdir / "exports" / "report.html").read_text(encoding="utf-8")
    groups = re.findall(r'<tr class="group"><td[^>]*>([^<]*) \(\d+\)</td></tr>', html)
    assert groups == ["8R Tractor", "S780 Combine"]
    assert html.count('class="low-stock"') == 1

    code, out = _cli(["export", "equipment", "--output", "-"], capsys)
    assert code == 0
    assert out.splitlines()[1].startswith("8R Tractor,tractor,John Deere,8R 370,2021")

    code, out = _cli(["low-stock"], capsys)
    assert "Fan Belt (R503581): 1 on hand, threshold 2" in out


def test_import_issue_log_written(seeded_config: Path, temp_workdir: Path, capsys):
    parts = temp_workdir / "imports" / "parts.csv"
    parts.write_text("Part Name,Part Number,Category\nGizmo,G1,Widgets\n", encoding="utf-8")
    code, out = _cli(["import-parts", str(parts)], capsys)
    assert code == 0
    assert "INFO import issues written to" in out
    [log_file] = list((temp_workdir / "logs").glob("import-issues-*.log"))
    [record] = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert record["severity"] == "WARNING"
    assert record["row"] == 2
    assert record["file"] == "parts.csv"
