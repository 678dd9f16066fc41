# Shared pytest fixtures
from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest

from farmguard.logging.init import reset_logging
from farmguard.storage import FarmRepository, MemoryStore

TODAY = date(2024, 6, 15)

PARTS_CSV = """Part Name,Part Number,Category,Supplier,Supplier Part Number,Quantity,Low Stock Threshold,Equipment,Notes
Engine Oil Filter,RE504836,filter,John Deere,JD-RE504836,5,2,8R Tractor,For 8R series
Hydraulic Filter,RE210857,Filters,NAPA,NAP-2108,3,2,"8R Tractor, S780 Combine",
15W-40 Engine Oil,TY26674,Lubricants,John Deere,,12,4,,2.5 gallon jugs
"""

EQUIPMENT_CSV = """Name,Type,Make,Model,Year,Serial Number,Purchase Date,Current Hours,Warranty Expiry,Notes
8R Tractor,tractor,John Deere,8R 370,2021,1RW8370RXMD012345,2021-03-15,1250,2026-03-15,Front duals
S780 Combine,Combines,John Deere,S780,2019,1H0S780SCK0765432,07/01/2019,2100,,
"""


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "imports").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("FARMGUARD_DATA_DIR", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """data_directory: ./data
export_directory: ./exports
log_directory: ./logs
key_prefix: farmguard_
seed_default_intervals: false
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "farmguard.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def parts_csv_file(temp_workdir: Path) -> Path:
    f = temp_workdir / "imports" / "parts.csv"
    f.write_text(PARTS_CSV, encoding="utf-8")
    return f


@pytest.fixture()
def equipment_csv_file(temp_workdir: Path) -> Path:
    f = temp_workdir / "imports" / "equipment.csv"
    f.write_text(EQUIPMENT_CSV, encoding="utf-8")
    return f


@pytest.fixture()
def repository() -> FarmRepository:
    return FarmRepository(MemoryStore())


@pytest.fixture()
def clean_logging():
    reset_logging()
    yield
    reset_logging()
