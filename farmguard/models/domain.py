from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

"""Persisted domain entities for the farm equipment tracker.

Equipment, consumables (parts), maintenance logs and maintenance intervals are
stored as whole collections by the storage layer. Every entity serializes to a
plain dict with `to_dict()` and is rebuilt with `from_dict()`; enum members are
stored by value.

The import pipeline never builds these directly: it produces creation payloads
(`EquipmentPayload`, `ConsumablePayload`) and the repository stamps ids and
timestamps when it persists them.
"""

__all__ = [
    "ConsumableCategory",
    "EquipmentType",
    "CONSUMABLE_CATEGORY_LABELS",
    "EQUIPMENT_TYPE_LABELS",
    "DEFAULT_MAINTENANCE_INTERVALS",
    "Equipment",
    "EquipmentPayload",
    "Consumable",
    "ConsumablePayload",
    "ConsumableUsage",
    "MaintenanceLog",
    "MaintenanceInterval",
    "generate_id",
    "utc_timestamp",
]


class ConsumableCategory(Enum):
    """Closed vocabulary for consumable parts."""
    FILTER = "filter"
    OIL = "oil"
    FLUID = "fluid"
    BELT = "belt"
    ELECTRICAL = "electrical"
    HARDWARE = "hardware"
    OTHER = "other"


class EquipmentType(Enum):
    """Closed vocabulary for equipment records."""
    TRACTOR = "tractor"
    COMBINE = "combine"
    TRUCK = "truck"
    IMPLEMENT = "implement"
    SPRAYER = "sprayer"
    PLANTER = "planter"
    LOADER = "loader"
    MOWER = "mower"
    OTHER = "other"


CONSUMABLE_CATEGORY_LABELS: dict[ConsumableCategory, str] = {
    ConsumableCategory.FILTER: "Filters",
    ConsumableCategory.OIL: "Oil & Lubricants",
    ConsumableCategory.FLUID: "Fluids",
    ConsumableCategory.BELT: "Belts & Hoses",
    ConsumableCategory.ELECTRICAL: "Electrical",
    ConsumableCategory.HARDWARE: "Hardware",
    ConsumableCategory.OTHER: "Other",
}

EQUIPMENT_TYPE_LABELS: dict[EquipmentType, str] = {
    EquipmentType.TRACTOR: "Tractor",
    EquipmentType.COMBINE: "Combine",
    EquipmentType.TRUCK: "Truck",
    EquipmentType.IMPLEMENT: "Implement",
    EquipmentType.SPRAYER: "Sprayer",
    EquipmentType.PLANTER: "Planter",
    EquipmentType.LOADER: "Loader",
    EquipmentType.MOWER: "Mower",
    EquipmentType.OTHER: "Other",
}

# (name, interval_hours, interval_days)
DEFAULT_MAINTENANCE_INTERVALS: tuple[tuple[str, int | None, int | None], ...] = (
    ("Oil Change", 250, None),
    ("Grease Fittings", 50, None),
    ("Air Filter", 500, None),
    ("Fuel Filter", 500, None),
    ("Hydraulic Filter", 1000, None),
    ("Coolant Check", 100, None),
    ("Belt Inspection", 500, None),
    ("Annual Inspection", None, 365),
)


def generate_id() -> str:
    return uuid.uuid4().hex


def utc_timestamp() -> str:
    """ISO8601 UTC timestamp with 'Z' suffix."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class EquipmentPayload:
    """Creation payload for an Equipment record (no id / timestamps yet)."""
    name: str
    type: EquipmentType
    make: str
    model: str
    year: int
    serial_number: str
    purchase_date: str  # ISO YYYY-MM-DD
    current_hours: float
    warranty_expiry: str | None = None
    notes: str | None = None


@dataclass
class Equipment:
    id: str
    name: str
    type: EquipmentType
    make: str
    model: str
    year: int
    serial_number: str
    purchase_date: str
    current_hours: float
    created_at: str
    updated_at: str
    warranty_expiry: str | None = None
    notes: str | None = None

    @staticmethod
    def create(payload: EquipmentPayload) -> Equipment:
        now = utc_timestamp()
        return Equipment(
            id=generate_id(),
            name=payload.name,
            type=payload.type,
            make=payload.make,
            model=payload.model,
            year=payload.year,
            serial_number=payload.serial_number,
            purchase_date=payload.purchase_date,
            current_hours=payload.current_hours,
            warranty_expiry=payload.warranty_expiry,
            notes=payload.notes,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Equipment:
        return Equipment(
            id=data["id"],
            name=data["name"],
            type=EquipmentType(data.get("type", "other")),
            make=data.get("make", ""),
            model=data.get("model", ""),
            year=int(data.get("year", 0)),
            serial_number=data.get("serial_number", ""),
            purchase_date=data.get("purchase_date", ""),
            current_hours=float(data.get("current_hours", 0)),
            warranty_expiry=data.get("warranty_expiry"),
            notes=data.get("notes"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass(frozen=True)
class ConsumablePayload:
    """Creation payload for a Consumable record (no id / timestamps yet)."""
    name: str
    part_number: str
    category: ConsumableCategory
    quantity: int
    low_stock_threshold: int
    supplier: str | None = None
    supplier_part_number: str | None = None
    compatible_equipment: tuple[str, ...] = ()
    notes: str | None = None


@dataclass
class Consumable:
    id: str
    name: str
    part_number: str
    category: ConsumableCategory
    quantity: int
    low_stock_threshold: int
    created_at: str
    updated_at: str
    supplier: str | None = None
    supplier_part_number: str | None = None
    compatible_equipment: list[str] = field(default_factory=list)
    notes: str | None = None

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.low_stock_threshold

    @staticmethod
    def create(payload: ConsumablePayload) -> Consumable:
        now = utc_timestamp()
        return Consumable(
            id=generate_id(),
            name=payload.name,
            part_number=payload.part_number,
            category=payload.category,
            quantity=payload.quantity,
            low_stock_threshold=payload.low_stock_threshold,
            supplier=payload.supplier,
            supplier_part_number=payload.supplier_part_number,
            compatible_equipment=list(payload.compatible_equipment),
            notes=payload.notes,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Consumable:
        return Consumable(
            id=data["id"],
            name=data["name"],
            part_number=data.get("part_number", ""),
            category=ConsumableCategory(data.get("category", "other")),
            quantity=int(data.get("quantity", 0)),
            low_stock_threshold=int(data.get("low_stock_threshold", 2)),
            supplier=data.get("supplier"),
            supplier_part_number=data.get("supplier_part_number"),
            compatible_equipment=list(data.get("compatible_equipment") or []),
            notes=data.get("notes"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass(frozen=True)
class ConsumableUsage:
    consumable_id: str
    name: str
    quantity: int


@dataclass
class MaintenanceLog:
    id: str
    equipment_id: str
    date: str
    hours_at_service: float
    type: str  # routine | repair | inspection
    description: str
    performed_by: str  # owner | dealer | employee
    created_at: str
    consumables_used: list[ConsumableUsage] = field(default_factory=list)
    performed_by_name: str | None = None
    downtime_hours: float | None = None
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> MaintenanceLog:
        return MaintenanceLog(
            id=data["id"],
            equipment_id=data["equipment_id"],
            date=data.get("date", ""),
            hours_at_service=float(data.get("hours_at_service", 0)),
            type=data.get("type", "routine"),
            description=data.get("description", ""),
            performed_by=data.get("performed_by", "owner"),
            created_at=data.get("created_at", ""),
            consumables_used=[ConsumableUsage(**u) for u in data.get("consumables_used") or []],
            performed_by_name=data.get("performed_by_name"),
            downtime_hours=data.get("downtime_hours"),
            notes=data.get("notes"),
        )


@dataclass
class MaintenanceInterval:
    """Recurring service rule tied to equipment hours or elapsed days."""
    id: str
    equipment_id: str
    name: str
    interval_hours: float | None = None
    interval_days: int | None = None
    last_performed_hours: float | None = None
    last_performed_date: str | None = None
    notes: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> MaintenanceInterval:
        return MaintenanceInterval(
            id=data["id"],
            equipment_id=data["equipment_id"],
            name=data.get("name", ""),
            interval_hours=data.get("interval_hours"),
            interval_days=data.get("interval_days"),
            last_performed_hours=data.get("last_performed_hours"),
            last_performed_date=data.get("last_performed_date"),
            notes=data.get("notes"),
        )
