"""Domain models for the farm equipment tracker.

Persisted entities, parsed/processed import records, import issue records and
import result statistics.
"""

from .domain import (
    Consumable,
    ConsumableCategory,
    ConsumablePayload,
    Equipment,
    EquipmentPayload,
    EquipmentType,
    MaintenanceInterval,
    MaintenanceLog,
)
from .import_result import ImportResult, ImportRunResult
from .issue_record import ImportIssue, IssueSeverity
from .parsed import ParsedEquipment, ParsedPart, ParseResult, ProcessedPart
from .row_data import RawRow

__all__ = [
    # Persisted entities
    "Consumable",
    "ConsumableCategory",
    "ConsumablePayload",
    "Equipment",
    "EquipmentPayload",
    "EquipmentType",
    "MaintenanceInterval",
    "MaintenanceLog",
    # Import records
    "ParsedEquipment",
    "ParsedPart",
    "ParseResult",
    "ProcessedPart",
    "RawRow",
    # Results
    "ImportIssue",
    "ImportResult",
    "ImportRunResult",
    "IssueSeverity",
]
