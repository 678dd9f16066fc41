from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .domain import ConsumableCategory, EquipmentType

"""Typed records produced by the row parser, duplicate merger and name matcher.

Invalid rows are kept (``is_valid=False`` with a ``validation_error``) so a
preview can show why a row failed. ``row_number`` is the source line number
and is always >= 2 because line 1 is the header.
"""

__all__ = [
    "ParsedPart",
    "ParsedEquipment",
    "ProcessedPart",
    "ParseResult",
]


@dataclass(frozen=True)
class ParsedPart:
    name: str
    part_number: str
    category: ConsumableCategory
    quantity: int
    low_stock_threshold: int
    row_number: int
    is_valid: bool
    supplier: str | None = None
    supplier_part_number: str | None = None
    equipment: str | None = None  # raw comma-separated equipment names
    notes: str | None = None
    validation_error: str | None = None

    @property
    def equipment_names(self) -> list[str]:
        if not self.equipment:
            return []
        return [n.strip() for n in self.equipment.split(",") if n.strip()]


@dataclass(frozen=True)
class ParsedEquipment:
    name: str
    type: EquipmentType
    make: str
    model: str
    year: int
    serial_number: str
    purchase_date: str
    current_hours: float
    row_number: int
    is_valid: bool
    warranty_expiry: str | None = None
    notes: str | None = None
    validation_error: str | None = None


@dataclass
class ProcessedPart:
    """Post-merge, post-match state of one or more rows sharing a part number.

    ``merged_from`` stays None for a record built from a single row; on the first
    merge it is seeded with the record's own row number.
    """
    name: str
    part_number: str
    category: ConsumableCategory
    quantity: int
    low_stock_threshold: int
    row_number: int
    is_valid: bool
    supplier: str | None = None
    supplier_part_number: str | None = None
    notes: str | None = None
    validation_error: str | None = None
    equipment_names: list[str] = field(default_factory=list)
    matched_equipment_ids: list[str] = field(default_factory=list)
    unmatched_equipment: list[str] = field(default_factory=list)
    merged_from: list[int] | None = None
    _distinct_notes: list[str] = field(default_factory=list, init=False, repr=False, compare=False)

    @staticmethod
    def from_parsed(part: ParsedPart) -> ProcessedPart:
        processed = ProcessedPart(
            name=part.name,
            part_number=part.part_number,
            category=part.category,
            quantity=part.quantity,
            low_stock_threshold=part.low_stock_threshold,
            row_number=part.row_number,
            is_valid=part.is_valid,
            supplier=part.supplier,
            supplier_part_number=part.supplier_part_number,
            notes=part.notes,
            validation_error=part.validation_error,
            equipment_names=list(part.equipment_names),
        )
        if part.notes:
            processed._distinct_notes.append(part.notes)
        return processed


R = TypeVar("R")


@dataclass(frozen=True)
class ParseResult(Generic[R]):
    """Outcome of parsing one file.

    ``errors`` mixes file-level failures and advisory warnings. A row is
    unusable only when its own ``is_valid`` is False.
    """
    success: bool
    records: list[R]
    errors: list[str]

    @property
    def valid_records(self) -> list[R]:
        return [r for r in self.records if getattr(r, "is_valid", False)]

    @property
    def invalid_records(self) -> list[R]:
        return [r for r in self.records if not getattr(r, "is_valid", False)]
