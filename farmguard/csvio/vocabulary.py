from __future__ import annotations

from ..models.domain import (
    CONSUMABLE_CATEGORY_LABELS,
    EQUIPMENT_TYPE_LABELS,
    ConsumableCategory,
    EquipmentType,
)

"""Vocabulary normalizer for free-text category and equipment type cells.

Input is lower-cased and trimmed, looked up in an alias table, then matched
against each member's value and display label. A total miss returns None:
the caller owns the fallback to OTHER and the warning that goes with it.
"""

__all__ = [
    "CATEGORY_ALIASES",
    "EQUIPMENT_TYPE_ALIASES",
    "normalize_category",
    "normalize_equipment_type",
]

CATEGORY_ALIASES: dict[str, ConsumableCategory] = {
    "filter": ConsumableCategory.FILTER,
    "filters": ConsumableCategory.FILTER,
    "oil": ConsumableCategory.OIL,
    "oils": ConsumableCategory.OIL,
    "oil & lubricants": ConsumableCategory.OIL,
    "lubricant": ConsumableCategory.OIL,
    "lubricants": ConsumableCategory.OIL,
    "grease": ConsumableCategory.OIL,
    "fluid": ConsumableCategory.FLUID,
    "fluids": ConsumableCategory.FLUID,
    "belt": ConsumableCategory.BELT,
    "belts": ConsumableCategory.BELT,
    "belts & hoses": ConsumableCategory.BELT,
    "hose": ConsumableCategory.BELT,
    "hoses": ConsumableCategory.BELT,
    "electrical": ConsumableCategory.ELECTRICAL,
    "electric": ConsumableCategory.ELECTRICAL,
    "hardware": ConsumableCategory.HARDWARE,
    "other": ConsumableCategory.OTHER,
}

EQUIPMENT_TYPE_ALIASES: dict[str, EquipmentType] = {
    "tractor": EquipmentType.TRACTOR,
    "tractors": EquipmentType.TRACTOR,
    "combine": EquipmentType.COMBINE,
    "combines": EquipmentType.COMBINE,
    "harvester": EquipmentType.COMBINE,
    "harvesters": EquipmentType.COMBINE,
    "truck": EquipmentType.TRUCK,
    "trucks": EquipmentType.TRUCK,
    "pickup": EquipmentType.TRUCK,
    "implement": EquipmentType.IMPLEMENT,
    "implements": EquipmentType.IMPLEMENT,
    "tillage": EquipmentType.IMPLEMENT,
    "disc": EquipmentType.IMPLEMENT,
    "plow": EquipmentType.IMPLEMENT,
    "sprayer": EquipmentType.SPRAYER,
    "sprayers": EquipmentType.SPRAYER,
    "planter": EquipmentType.PLANTER,
    "planters": EquipmentType.PLANTER,
    "seeder": EquipmentType.PLANTER,
    "drill": EquipmentType.PLANTER,
    "loader": EquipmentType.LOADER,
    "loaders": EquipmentType.LOADER,
    "skid steer": EquipmentType.LOADER,
    "mower": EquipmentType.MOWER,
    "mowers": EquipmentType.MOWER,
    "swather": EquipmentType.MOWER,
    "haybine": EquipmentType.MOWER,
    "other": EquipmentType.OTHER,
}


def normalize_category(text: str) -> ConsumableCategory | None:
    normalized = text.lower().strip()
    if normalized in CATEGORY_ALIASES:
        return CATEGORY_ALIASES[normalized]
    for member, label in CONSUMABLE_CATEGORY_LABELS.items():
        if member.value == normalized or label.lower() == normalized:
            return member
    return None


def normalize_equipment_type(text: str) -> EquipmentType | None:
    normalized = text.lower().strip()
    if normalized in EQUIPMENT_TYPE_ALIASES:
        return EQUIPMENT_TYPE_ALIASES[normalized]
    for member, label in EQUIPMENT_TYPE_LABELS.items():
        if member.value == normalized or label.lower() == normalized:
            return member
    return None
