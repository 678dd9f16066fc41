from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from pathlib import Path

from ..csvio.parser import parse_equipment, parse_parts
from ..csvio.reader import CsvReadError, read_csv_text
from ..logging.issue_log import IssueLogBuffer
from ..models.domain import (
    Consumable,
    ConsumablePayload,
    Equipment,
    EquipmentPayload,
)
from ..models.import_result import ImportResult, ImportRunResult
from ..models.issue_record import ImportIssue, IssueSeverity
from ..models.parsed import ParsedEquipment, ParsedPart, ParseResult, ProcessedPart
from ..storage.repository import FarmRepository
from .matcher import NamedEquipment, resolve_part_equipment
from .merger import merge_duplicate_parts
from .progress import ImportProgress

"""Import pipeline for parts and equipment CSV files.

Parts:     text -> parse -> merge duplicates -> match equipment names -> preview
Equipment: text -> parse -> preview

Merging happens before matching so equipment names from every duplicate row
are unioned first and resolved once. A preview is pure data; nothing is
written until ``commit_*`` is called with a repository, and only valid
records are committed.
"""

__all__ = [
    "ProcessingError",
    "ImportCommitError",
    "PartsImportPreview",
    "EquipmentImportPreview",
    "preview_parts_import",
    "preview_equipment_import",
    "consumable_payloads",
    "equipment_payloads",
    "commit_parts_import",
    "commit_equipment_import",
    "collect_issues",
    "import_files",
    "IMPORT_KINDS",
]

logger = logging.getLogger(__name__)

IMPORT_KINDS = ("parts", "equipment")

_ROW_PREFIX = re.compile(r"^Row (\d+):")


class ProcessingError(Exception):
    """Fatal error that stops a whole import run."""


class ImportCommitError(Exception):
    """Raised when a preview has nothing that can be committed."""


@dataclass(frozen=True)
class PartsImportPreview:
    file_name: str
    parse: ParseResult[ParsedPart]
    parts: list[ProcessedPart]
    merge_warnings: list[str]
    equipment_warnings: list[str]

    @property
    def warnings(self) -> list[str]:
        return [*self.parse.errors, *self.merge_warnings, *self.equipment_warnings]

    @property
    def valid_parts(self) -> list[ProcessedPart]:
        return [p for p in self.parts if p.is_valid]

    @property
    def merged_rows(self) -> int:
        return sum(len(p.merged_from) - 1 for p in self.parts if p.merged_from)


@dataclass(frozen=True)
class EquipmentImportPreview:
    file_name: str
    parse: ParseResult[ParsedEquipment]

    @property
    def warnings(self) -> list[str]:
        return list(self.parse.errors)

    @property
    def valid_equipment(self) -> list[ParsedEquipment]:
        return self.parse.valid_records


def preview_parts_import(
    content: str,
    existing_equipment: Iterable[NamedEquipment],
    *,
    file_name: str = "<input>",
) -> PartsImportPreview:
    parse = parse_parts(content)
    parts = resolve_part_equipment(merge_duplicate_parts(parse.records), existing_equipment)

    merge_warnings: list[str] = []
    equipment_warnings: list[str] = []
    for part in parts:
        if part.merged_from and len(part.merged_from) > 1:
            rows = ", ".join(str(r) for r in part.merged_from)
            merge_warnings.append(
                f"Part #{part.part_number}: Merged {len(part.merged_from)} duplicate rows (rows {rows})"
            )
        if part.unmatched_equipment:
            names = '", "'.join(part.unmatched_equipment)
            equipment_warnings.append(f'Part #{part.part_number}: Equipment not found: "{names}"')

    return PartsImportPreview(
        file_name=file_name,
        parse=parse,
        parts=parts,
        merge_warnings=merge_warnings,
        equipment_warnings=equipment_warnings,
    )


def preview_equipment_import(
    content: str, *, file_name: str = "<input>", today: date | None = None
) -> EquipmentImportPreview:
    return EquipmentImportPreview(file_name=file_name, parse=parse_equipment(content, today=today))


def consumable_payloads(preview: PartsImportPreview) -> list[ConsumablePayload]:
    return [
        ConsumablePayload(
            name=p.name,
            part_number=p.part_number,
            category=p.category,
            quantity=p.quantity,
            low_stock_threshold=p.low_stock_threshold,
            supplier=p.supplier,
            supplier_part_number=p.supplier_part_number,
            compatible_equipment=tuple(p.matched_equipment_ids),
            notes=p.notes,
        )
        for p in preview.valid_parts
    ]


def equipment_payloads(preview: EquipmentImportPreview) -> list[EquipmentPayload]:
    return [
        EquipmentPayload(
            name=e.name,
            type=e.type,
            make=e.make,
            model=e.model,
            year=e.year,
            serial_number=e.serial_number,
            purchase_date=e.purchase_date,
            current_hours=e.current_hours,
            warranty_expiry=e.warranty_expiry,
            notes=e.notes,
        )
        for e in preview.valid_equipment
    ]


def commit_parts_import(preview: PartsImportPreview, repository: FarmRepository) -> list[Consumable]:
    payloads = consumable_payloads(preview)
    if not payloads:
        raise ImportCommitError(f"{preview.file_name}: no valid parts to import")
    created = repository.bulk_add_consumables(payloads)
    logger.info(f"{preview.file_name}: imported {len(created)} parts")
    return created


def commit_equipment_import(
    preview: EquipmentImportPreview,
    repository: FarmRepository,
    *,
    seed_intervals: bool = False,
    today: date | None = None,
) -> list[Equipment]:
    payloads = equipment_payloads(preview)
    if not payloads:
        raise ImportCommitError(f"{preview.file_name}: no valid equipment to import")
    created = repository.bulk_add_equipment(payloads)
    if seed_intervals:
        repository.seed_default_intervals(created, today=today)
    logger.info(f"{preview.file_name}: imported {len(created)} equipment records")
    return created


def collect_issues(preview: PartsImportPreview | EquipmentImportPreview) -> list[ImportIssue]:
    """Classify a preview's messages into FILE / ROW / WARNING issues."""
    issues: list[ImportIssue] = []
    name = preview.file_name
    if not preview.parse.records:
        for message in preview.parse.errors:
            issues.append(ImportIssue.create(name, -1, IssueSeverity.FILE, message))
        return issues

    for record in preview.parse.invalid_records:
        issues.append(
            ImportIssue.create(name, record.row_number, IssueSeverity.ROW, record.validation_error or "invalid row")
        )
    for message in preview.warnings:
        m = _ROW_PREFIX.match(message)
        row = int(m.group(1)) if m else -1
        issues.append(ImportIssue.create(name, row, IssueSeverity.WARNING, message))
    return issues


def _import_one(
    path: Path,
    kind: str,
    repository: FarmRepository,
    *,
    dry_run: bool,
    seed_intervals: bool,
    issue_log: IssueLogBuffer | None,
) -> ImportResult:
    started = time.perf_counter()
    try:
        content = read_csv_text(path)
    except CsvReadError as e:
        logger.error(f"{path.name}: {e}")
        if issue_log is not None:
            issue_log.append(ImportIssue.create(path.name, -1, IssueSeverity.FILE, str(e)))
        return ImportResult(
            file_name=path.name, kind=kind, success=False, total_rows=0, valid_rows=0,
            invalid_rows=0, warnings=0, elapsed_seconds=time.perf_counter() - started, error=str(e),
        )

    preview: PartsImportPreview | EquipmentImportPreview
    if kind == "parts":
        preview = preview_parts_import(content, repository.list_equipment(), file_name=path.name)
        valid = len(preview.valid_parts)
        merged = preview.merged_rows
    else:
        preview = preview_equipment_import(content, file_name=path.name)
        valid = len(preview.valid_equipment)
        merged = 0

    for message in preview.warnings:
        logger.warning(f"{path.name}: {message}")
    for record in preview.parse.invalid_records:
        logger.warning(f"{path.name}: Row {record.row_number}: {record.validation_error}")
    if issue_log is not None:
        for issue in collect_issues(preview):
            issue_log.append(issue)

    error: str | None = None
    imported = 0
    if not preview.parse.success:
        error = "; ".join(preview.parse.errors) if not preview.parse.records else "no valid rows"
        logger.error(f"{path.name}: {error}")
    elif not dry_run:
        if isinstance(preview, PartsImportPreview):
            imported = len(commit_parts_import(preview, repository))
        else:
            imported = len(commit_equipment_import(preview, repository, seed_intervals=seed_intervals))

    return ImportResult(
        file_name=path.name,
        kind=kind,
        success=error is None,
        total_rows=len(preview.parse.records),
        valid_rows=valid,
        invalid_rows=len(preview.parse.invalid_records),
        warnings=len(preview.warnings),
        merged_rows=merged,
        imported=imported,
        elapsed_seconds=time.perf_counter() - started,
        error=error,
    )


def import_files(
    paths: list[Path],
    kind: str,
    repository: FarmRepository,
    *,
    dry_run: bool = False,
    seed_intervals: bool = False,
    issue_log: IssueLogBuffer | None = None,
) -> ImportRunResult:
    """Import each file independently; one bad file does not stop the others.

    Raises:
        ProcessingError: unknown kind
    """
    if kind not in IMPORT_KINDS:
        raise ProcessingError(f"unknown import kind: {kind}")

    start_time = datetime.now(UTC)
    results: list[ImportResult] = []
    with ImportProgress(len(paths), kind=kind) as progress:
        for path in paths:
            progress.start_file(path)
            result = _import_one(
                path,
                kind,
                repository,
                dry_run=dry_run,
                seed_intervals=seed_intervals,
                issue_log=issue_log,
            )
            results.append(result)
            progress.file_done(result)

    if issue_log is not None and len(issue_log):
        path = issue_log.flush()
        logger.info(f"import issues written to {path}")

    end_time = datetime.now(UTC)
    return ImportRunResult(
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_results=results,
    )
