from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, FarmGuardConfig, load_config
from ..csvio.export import (
    equipment_to_csv,
    generate_equipment_template,
    generate_parts_template,
    parts_to_csv,
    parts_to_html,
)
from ..csvio.parser import parse_records, resolve_headers
from ..csvio.reader import CsvReadError, read_csv_text
from ..csvio.schema import EQUIPMENT_SCHEMA, PARTS_SCHEMA
from ..csvio.tokenizer import split_records, tokenize
from ..logging.init import log_summary, setup_logging
from ..logging.issue_log import IssueLogBuffer
from ..services.maintenance import due_report
from ..services.pipeline import ProcessingError, import_files
from ..services.summary import render_summary_line
from ..storage.repository import FarmRepository
from ..storage.store import JsonFileStore, StorageError

"""Command line interface.

    farmguard [--config PATH] [--debug] <command> ...

Commands: import-parts, import-equipment, export, template, low-stock, due,
inspect. Import commands end with one SUMMARY line.

Exit codes:
    0  every file imported (or the command succeeded)
    2  at least one file failed or had no valid rows
    1  fatal: bad config, unreadable storage, bad arguments
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

_SCHEMAS = {"parts": PARTS_SCHEMA, "equipment": EQUIPMENT_SCHEMA}


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; values override the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="farmguard", description="Farm equipment maintenance tracker")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="Path to YAML config")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    for kind in ("parts", "equipment"):
        imp = sub.add_parser(f"import-{kind}", help=f"Import {kind} from CSV files")
        imp.add_argument("files", nargs="+", type=Path)
        imp.add_argument("--dry-run", action="store_true", help="Parse and report without saving")

    exp = sub.add_parser("export", help="Export parts or equipment")
    exp.add_argument("kind", choices=("parts", "equipment"))
    exp.add_argument("--format", choices=("csv", "html"), default="csv")
    exp.add_argument("--output", help="Output file, '-' for stdout")

    tpl = sub.add_parser("template", help="Print a CSV import template")
    tpl.add_argument("kind", choices=("parts", "equipment"))
    tpl.add_argument("--empty", action="store_true", help="Headers only")

    sub.add_parser("low-stock", help="List parts at or below their low stock threshold")
    sub.add_parser("due", help="List maintenance that is due or overdue")

    ins = sub.add_parser("inspect", help="Show resolved columns and first rows of a CSV file")
    ins.add_argument("kind", choices=("parts", "equipment"))
    ins.add_argument("file", type=Path)
    return p.parse_args(argv)


def _write_output(content: str, output: str | None, default_path: Path) -> Path | None:
    if output == "-":
        print(content)
        return None
    path = Path(output) if output else default_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content + "\n", encoding="utf-8")
    return path


def _cmd_import(args: argparse.Namespace, cfg: FarmGuardConfig, repository: FarmRepository) -> int:
    logger = setup_logging()
    kind = args.command.removeprefix("import-")
    issue_log = IssueLogBuffer(cfg.log_directory)
    result = import_files(
        list(args.files),
        kind,
        repository,
        dry_run=args.dry_run,
        seed_intervals=cfg.seed_default_intervals,
        issue_log=issue_log,
    )
    if args.dry_run:
        logger.info("dry run: nothing was saved")

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result).removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _cmd_export(args: argparse.Namespace, cfg: FarmGuardConfig, repository: FarmRepository) -> int:
    logger = setup_logging()
    today = date.today()
    equipment = repository.list_equipment()
    if args.kind == "parts":
        consumables = repository.list_consumables()
        count = len(consumables)
        if args.format == "html":
            content = parts_to_html(consumables, equipment, generated=today)
        else:
            content = parts_to_csv(consumables, equipment)
    else:
        if args.format == "html":
            logger.error("html export is only available for parts")
            return EXIT_FATAL
        count = len(equipment)
        content = equipment_to_csv(equipment)

    default_path = cfg.export_directory / f"{args.kind}_export_{today.isoformat()}.{args.format}"
    path = _write_output(content, args.output, default_path)
    if path is not None:
        logger.info(f"exported {count} {args.kind} records to {path}")
    return EXIT_SUCCESS_ALL


def _cmd_template(args: argparse.Namespace) -> int:
    if args.kind == "parts":
        print(generate_parts_template(include_examples=not args.empty))
    else:
        print(generate_equipment_template(include_examples=not args.empty))
    return EXIT_SUCCESS_ALL


def _cmd_low_stock(args: argparse.Namespace, cfg: FarmGuardConfig, repository: FarmRepository) -> int:
    logger = setup_logging()
    items = repository.low_stock_consumables()
    if not items:
        logger.info("no parts are low on stock")
        return EXIT_SUCCESS_ALL
    for c in items:
        print(f"{c.name} ({c.part_number}): {c.quantity} on hand, threshold {c.low_stock_threshold}")
    logger.info(f"{len(items)} parts low on stock")
    return EXIT_SUCCESS_ALL


def _cmd_due(args: argparse.Namespace, cfg: FarmGuardConfig, repository: FarmRepository) -> int:
    logger = setup_logging()
    items = due_report(repository)
    if not items:
        logger.info("no maintenance due")
        return EXIT_SUCCESS_ALL
    for item in items:
        next_due = ""
        if item.next_due is not None:
            unit, value = item.next_due
            next_due = f" (next at {value:g} hrs)" if unit == "hours" else f" (next on {value})"
        print(f"{item.status.value.upper():8} {item.equipment.name}: {item.interval.name}{next_due}")
    return EXIT_SUCCESS_ALL


def _cmd_inspect(args: argparse.Namespace) -> int:
    logger = setup_logging()
    schema = _SCHEMAS[args.kind]
    try:
        content = read_csv_text(args.file)
    except CsvReadError as e:
        logger.error(f"inspect: {e}")
        return EXIT_FATAL

    records = split_records(content)
    header = tokenize(records[0])
    print(f"FILE: {args.file.name} rows={len(records) - 1}")
    for field_name, index in resolve_headers(header, schema).items():
        column = header[index] if index >= 0 else "-"
        print(f"  {field_name:22} <- {column}")
    sample = parse_records("\n".join(records[:4]), schema)
    for record in sample.records:
        status = "ok" if record.is_valid else f"invalid: {record.validation_error}"
        print(f"  row {record.row_number}: {record.name!r} {status}")
    for message in sample.errors:
        print(f"  note: {message}")
    return EXIT_SUCCESS_ALL


_HANDLERS: dict[str, Callable[[argparse.Namespace, FarmGuardConfig, FarmRepository], int]] = {
    "import-parts": _cmd_import,
    "import-equipment": _cmd_import,
    "export": _cmd_export,
    "low-stock": _cmd_low_stock,
    "due": _cmd_due,
}


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # read sys.argv only when no list was given; [] means "no arguments"
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = _parse_args(argv)
    except SystemExit as e:
        return EXIT_FATAL if e.code else EXIT_SUCCESS_ALL

    _load_env_file(Path(".env"), override=True)

    if args.debug:
        setup_logging(debug=True)
        logger.debug("debug mode enabled")

    # commands that need neither config nor storage
    if args.command == "template":
        return _cmd_template(args)
    if args.command == "inspect":
        return _cmd_inspect(args)

    try:
        cfg = load_config(Path(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    repository = FarmRepository(JsonFileStore(cfg.data_directory), key_prefix=cfg.key_prefix)
    logger.debug(f"data directory: {cfg.data_directory}")

    try:
        return _HANDLERS[args.command](args, cfg, repository)
    except StorageError as e:
        logger.error(f"storage: {e}")
        return EXIT_FATAL
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL
