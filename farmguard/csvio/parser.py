from __future__ import annotations

import logging
from datetime import date
from typing import Any

from ..models.parsed import ParsedEquipment, ParsedPart, ParseResult
from ..models.row_data import RawRow
from .coerce import RowContext, local_today
from .schema import EQUIPMENT_SCHEMA, PARTS_SCHEMA, RecordSchema
from .tokenizer import split_records, tokenize

"""Generic CSV row parser driven by a RecordSchema.

Steps:
1. Split content into logical records (blank lines dropped); no records is a
   file-level failure ("File is empty").
2. Tokenize the header, lower-case each cell and resolve one column index per
   schema field (-1 when absent). A missing required column aborts the file.
3. Every remaining record becomes a typed record, valid or not. Coercion
   warnings are appended to the shared errors list and never touch is_valid.
4. success is True iff at least one record is valid. A header with no data
   rows fails with "No data rows found in the file".

Nothing raises across this boundary; every failure is in the ParseResult.
"""

__all__ = [
    "HeaderIndex",
    "resolve_headers",
    "parse_records",
    "parse_parts",
    "parse_equipment",
]

logger = logging.getLogger(__name__)

HeaderIndex = dict[str, int]

EMPTY_FILE = "File is empty"
NO_DATA_ROWS = "No data rows found in the file"


def resolve_headers(header_cells: list[str], schema: RecordSchema) -> HeaderIndex:
    """Map each logical field to the first header cell its rule accepts."""
    headers = [h.lower().strip() for h in header_cells]
    index: HeaderIndex = {}
    for spec in schema.fields:
        index[spec.name] = next((i for i, h in enumerate(headers) if spec.matches(h)), -1)
    return index


def _build_record(
    row: RawRow,
    schema: RecordSchema,
    header_index: HeaderIndex,
    today: date,
    errors: list[str],
) -> Any:
    ctx = RowContext(row_number=row.line_number, today=today)
    values: dict[str, Any] = {}
    validation_error: str | None = None

    for spec in schema.fields:
        raw = row.cell(header_index[spec.name])
        if spec.required and not raw and validation_error is None:
            validation_error = spec.required_message or f"{spec.name} is required"
        value, warning = spec.coerce(raw, ctx)
        if warning:
            errors.append(warning)
        values[spec.name] = value

    return schema.factory(
        **values,
        row_number=row.line_number,
        is_valid=validation_error is None,
        validation_error=validation_error,
    )


def parse_records(
    content: str,
    schema: RecordSchema,
    *,
    today: date | None = None,
) -> ParseResult[Any]:
    today = today or local_today()
    errors: list[str] = []
    lines = split_records(content)

    if not lines:
        return ParseResult(success=False, records=[], errors=[EMPTY_FILE])

    header_index = resolve_headers(tokenize(lines[0]), schema)
    if any(header_index[spec.name] == -1 for spec in schema.required_fields):
        errors.append(schema.missing_columns_message)
        return ParseResult(success=False, records=[], errors=errors)

    records: list[Any] = []
    for i, line in enumerate(lines[1:], start=2):  # line 1 = header
        row = RawRow(line_number=i, cells=tuple(tokenize(line)))
        records.append(_build_record(row, schema, header_index, today, errors))

    if not records:
        errors.append(NO_DATA_ROWS)
        return ParseResult(success=False, records=[], errors=errors)

    valid_count = sum(1 for r in records if r.is_valid)
    logger.debug(f"{schema.kind} parse complete: {valid_count}/{len(records)} valid rows")
    return ParseResult(success=valid_count > 0, records=records, errors=errors)


def parse_parts(content: str, *, today: date | None = None) -> ParseResult[ParsedPart]:
    return parse_records(content, PARTS_SCHEMA, today=today)


def parse_equipment(content: str, *, today: date | None = None) -> ParseResult[ParsedEquipment]:
    return parse_records(content, EQUIPMENT_SCHEMA, today=today)
