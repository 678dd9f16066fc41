from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..models.parsed import ParsedEquipment, ParsedPart
from . import coerce as c

"""Field-schema descriptors for the two CSV record types.

A RecordSchema lists its logical fields in header-resolution order. Each
FieldSpec carries the fuzzy header rule used to find its column (lower-cased,
trimmed header text in, bool out), whether the column and value are required,
and the coercer that turns the cell into a typed value.

Header indexes resolve to the first header satisfying the rule, so two fields
may land on the same column when their rules overlap; the rules below exclude
the obvious collisions ("supplier part number" is not the part number).
"""

__all__ = [
    "FieldSpec",
    "RecordSchema",
    "PARTS_SCHEMA",
    "EQUIPMENT_SCHEMA",
    "PARTS_HEADERS",
    "EQUIPMENT_HEADERS",
]

HeaderRule = Callable[[str], bool]

DEFAULT_QUANTITY = 0
DEFAULT_LOW_STOCK_THRESHOLD = 2
DEFAULT_HOURS = 0.0


@dataclass(frozen=True)
class FieldSpec:
    name: str  # attribute name on the parsed record
    matches: HeaderRule
    coerce: c.Coercer = c.text
    required: bool = False  # column must exist and value must be non-empty
    required_message: str | None = None  # row-level error when the value is blank


@dataclass(frozen=True)
class RecordSchema:
    kind: str
    fields: tuple[FieldSpec, ...]
    missing_columns_message: str
    factory: Callable[..., Any]

    @property
    def required_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.required)


def _any_of(*tokens: str) -> HeaderRule:
    return lambda h: any(t in h for t in tokens)


PARTS_HEADERS = (
    "Part Name",
    "Part Number",
    "Category",
    "Supplier",
    "Supplier Part Number",
    "Quantity",
    "Low Stock Threshold",
    "Equipment",
    "Notes",
)

EQUIPMENT_HEADERS = (
    "Name",
    "Type",
    "Make",
    "Model",
    "Year",
    "Serial Number",
    "Purchase Date",
    "Current Hours",
    "Warranty Expiry",
    "Notes",
)

PARTS_SCHEMA = RecordSchema(
    kind="parts",
    fields=(
        FieldSpec(
            "name",
            lambda h: "name" in h and "supplier" not in h and "equipment" not in h,
            required=True,
            required_message="Part name is required",
        ),
        FieldSpec(
            "part_number",
            lambda h: "part" in h and "number" in h and "supplier" not in h,
            required=True,
            required_message="Part number is required",
        ),
        FieldSpec("category", _any_of("category"), c.category_or_other),
        FieldSpec("supplier", lambda h: h in ("supplier", "supplier name"), c.optional_text),
        FieldSpec("supplier_part_number", lambda h: "supplier" in h and "part" in h, c.optional_text),
        FieldSpec(
            "quantity",
            _any_of("quantity", "qty", "stock"),
            c.int_or_default("quantity", DEFAULT_QUANTITY),
        ),
        FieldSpec(
            "low_stock_threshold",
            _any_of("threshold", "low stock", "alert"),
            c.int_or_default("threshold", DEFAULT_LOW_STOCK_THRESHOLD),
        ),
        FieldSpec("equipment", _any_of("equipment", "compatible"), c.optional_text),
        FieldSpec("notes", _any_of("note"), c.optional_text),
    ),
    missing_columns_message="Missing required columns: Part Name and Part Number",
    factory=ParsedPart,
)

EQUIPMENT_SCHEMA = RecordSchema(
    kind="equipment",
    fields=(
        FieldSpec(
            "name",
            lambda h: "name" in h and not any(t in h for t in ("serial", "make", "model", "type")),
            required=True,
            required_message="Equipment name is required",
        ),
        FieldSpec("type", _any_of("type"), c.equipment_type_or_other),
        FieldSpec("make", _any_of("make", "manufacturer", "brand")),
        FieldSpec("model", lambda h: "model" in h),
        FieldSpec("year", _any_of("year"), c.year_or_current),
        FieldSpec("serial_number", _any_of("serial", "vin")),
        FieldSpec("purchase_date", _any_of("purchase"), c.date_or_today("purchase date")),
        FieldSpec("current_hours", _any_of("hour"), c.float_or_default("hours", DEFAULT_HOURS)),
        FieldSpec("warranty_expiry", _any_of("warranty"), c.optional_date("warranty expiry")),
        FieldSpec("notes", _any_of("note"), c.optional_text),
    ),
    missing_columns_message="Missing required column: Name",
    factory=ParsedEquipment,
)
