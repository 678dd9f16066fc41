from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Configuration loader.

- Load YAML (default ``config/farmguard.yml``)
- Validate against the packaged JSON schema (unknown keys rejected)
- Apply defaults for optional keys
- ``FARMGUARD_DATA_DIR`` overrides ``data_directory`` (set it in ``.env``)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/farmguard.yml")
DATA_DIR_ENV = "FARMGUARD_DATA_DIR"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class FarmGuardConfig:
    data_directory: Path
    export_directory: Path = Path("./exports")
    log_directory: Path = Path("./logs")
    key_prefix: str = "farmguard_"
    seed_default_intervals: bool = False


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or data fails validation
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> FarmGuardConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: expected a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    data_dir = os.getenv(DATA_DIR_ENV) or data["data_directory"]
    defaults = FarmGuardConfig(data_directory=Path(data_dir))
    return FarmGuardConfig(
        data_directory=Path(data_dir),
        export_directory=Path(data.get("export_directory", defaults.export_directory)),
        log_directory=Path(data.get("log_directory", defaults.log_directory)),
        key_prefix=data.get("key_prefix", defaults.key_prefix),
        seed_default_intervals=bool(data.get("seed_default_intervals", defaults.seed_default_intervals)),
    )
