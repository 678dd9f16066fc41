from __future__ import annotations

import logging

from ..models.parsed import ParsedPart, ProcessedPart

"""Duplicate part merger.

Valid rows are grouped by ``part_number.strip().lower()`` in first-seen order.
For every later row of a group:
- quantities are summed over the valid rows of the group
- merged_from collects source row numbers (seeded with the first row's own)
- supplier / supplier_part_number fill only while still empty
- notes concatenate distinct values with "; "; a value is skipped only when
  it exactly equals an earlier contributing note
- equipment names are unioned, first spelling wins

Invalid rows never join a group; each passes through as its own record at its
input position so the preview can still show its validation error. An
invalid row therefore never adds to a group's quantity, even when it shares the
part number.
Single pass, no hidden state: the same input always gives the same output.
"""

__all__ = [
    "NOTES_SEPARATOR",
    "merge_duplicate_parts",
    "part_number_key",
]

logger = logging.getLogger(__name__)

NOTES_SEPARATOR = "; "


def part_number_key(part_number: str) -> str:
    return part_number.strip().lower()


def _fold(acc: ProcessedPart, part: ParsedPart) -> None:
    acc.quantity += part.quantity

    if acc.merged_from is None:
        acc.merged_from = [acc.row_number]
    acc.merged_from.append(part.row_number)

    if not acc.supplier and part.supplier:
        acc.supplier = part.supplier
    if not acc.supplier_part_number and part.supplier_part_number:
        acc.supplier_part_number = part.supplier_part_number

    if part.notes and part.notes not in acc._distinct_notes:
        acc._distinct_notes.append(part.notes)
        acc.notes = NOTES_SEPARATOR.join(acc._distinct_notes)

    seen = {n.lower() for n in acc.equipment_names}
    for name in part.equipment_names:
        if name.lower() not in seen:
            acc.equipment_names.append(name)
            seen.add(name.lower())


def merge_duplicate_parts(records: list[ParsedPart]) -> list[ProcessedPart]:
    output: list[ProcessedPart] = []
    by_key: dict[str, ProcessedPart] = {}

    for part in records:
        if not part.is_valid:
            output.append(ProcessedPart.from_parsed(part))
            continue

        key = part_number_key(part.part_number)
        acc = by_key.get(key)
        if acc is None:
            acc = ProcessedPart.from_parsed(part)
            by_key[key] = acc
            output.append(acc)
        else:
            _fold(acc, part)

    merged = sum(len(p.merged_from) - 1 for p in output if p.merged_from)
    if merged:
        logger.debug(f"merged {merged} duplicate part rows into {len(by_key)} parts")
    return output
