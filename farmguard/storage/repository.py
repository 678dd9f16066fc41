from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any, TypeVar

from ..models.domain import (
    DEFAULT_MAINTENANCE_INTERVALS,
    Consumable,
    ConsumablePayload,
    Equipment,
    EquipmentPayload,
    MaintenanceInterval,
    MaintenanceLog,
    generate_id,
    utc_timestamp,
)
from .store import KeyValueStore, StorageError

"""Farm data repository.

Wraps an injected KeyValueStore and exposes the four persisted collections
(equipment, maintenance logs, intervals, consumables). Every mutation loads
the whole collection, changes it and writes it back.
"""

__all__ = [
    "StorageKeys",
    "FarmRepository",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_KEY_PREFIX = "farmguard_"


@dataclass(frozen=True)
class StorageKeys:
    equipment: str
    maintenance_logs: str
    intervals: str
    consumables: str

    @staticmethod
    def with_prefix(prefix: str = DEFAULT_KEY_PREFIX) -> StorageKeys:
        return StorageKeys(
            equipment=f"{prefix}equipment",
            maintenance_logs=f"{prefix}maintenance_logs",
            intervals=f"{prefix}intervals",
            consumables=f"{prefix}consumables",
        )


class FarmRepository:
    def __init__(self, store: KeyValueStore, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self.store = store
        self.keys = StorageKeys.with_prefix(key_prefix)

    # ── generic load / save ────────────────────────────────────────────

    def _load(self, key: str, factory: Callable[[dict[str, Any]], T]) -> list[T]:
        raw = self.store.get(key)
        if raw is None:
            return []
        try:
            return [factory(item) for item in raw]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageError(f"corrupt record in {key}: {e}") from e

    def _save(self, key: str, items: Iterable[Any]) -> None:
        data = [item.to_dict() for item in items]
        self.store.set(key, data)
        logger.debug(f"saved {len(data)} records to {key}")

    # ── equipment ──────────────────────────────────────────────────────

    def list_equipment(self) -> list[Equipment]:
        return self._load(self.keys.equipment, Equipment.from_dict)

    def get_equipment(self, equipment_id: str) -> Equipment | None:
        return next((e for e in self.list_equipment() if e.id == equipment_id), None)

    def add_equipment(self, payload: EquipmentPayload) -> Equipment:
        return self.bulk_add_equipment([payload])[0]

    def bulk_add_equipment(self, payloads: Iterable[EquipmentPayload]) -> list[Equipment]:
        created = [Equipment.create(p) for p in payloads]
        self._save(self.keys.equipment, [*self.list_equipment(), *created])
        return created

    def update_equipment(self, equipment_id: str, **changes: Any) -> Equipment | None:
        items = self.list_equipment()
        updated: Equipment | None = None
        for item in items:
            if item.id == equipment_id:
                for attr, value in changes.items():
                    setattr(item, attr, value)
                item.updated_at = utc_timestamp()
                updated = item
        self._save(self.keys.equipment, items)
        return updated

    def delete_equipment(self, equipment_id: str) -> None:
        """Delete equipment together with its maintenance logs and intervals."""
        self._save(self.keys.equipment, [e for e in self.list_equipment() if e.id != equipment_id])
        self._save(
            self.keys.maintenance_logs,
            [log for log in self.list_maintenance_logs() if log.equipment_id != equipment_id],
        )
        self._save(
            self.keys.intervals,
            [i for i in self.list_intervals() if i.equipment_id != equipment_id],
        )

    # ── maintenance logs ───────────────────────────────────────────────

    def list_maintenance_logs(self) -> list[MaintenanceLog]:
        return self._load(self.keys.maintenance_logs, MaintenanceLog.from_dict)

    def add_maintenance_log(self, **fields: Any) -> MaintenanceLog:
        log = MaintenanceLog(id=generate_id(), created_at=utc_timestamp(), **fields)
        self._save(self.keys.maintenance_logs, [*self.list_maintenance_logs(), log])
        return log

    def delete_maintenance_log(self, log_id: str) -> None:
        self._save(
            self.keys.maintenance_logs,
            [log for log in self.list_maintenance_logs() if log.id != log_id],
        )

    def logs_for_equipment(self, equipment_id: str) -> list[MaintenanceLog]:
        """Logs of one machine, newest service date first."""
        logs = [log for log in self.list_maintenance_logs() if log.equipment_id == equipment_id]
        return sorted(logs, key=lambda log: log.date, reverse=True)

    # ── intervals ──────────────────────────────────────────────────────

    def list_intervals(self) -> list[MaintenanceInterval]:
        return self._load(self.keys.intervals, MaintenanceInterval.from_dict)

    def add_interval(self, **fields: Any) -> MaintenanceInterval:
        interval = MaintenanceInterval(id=generate_id(), **fields)
        self._save(self.keys.intervals, [*self.list_intervals(), interval])
        return interval

    def update_interval(self, interval_id: str, **changes: Any) -> None:
        items = self.list_intervals()
        for item in items:
            if item.id == interval_id:
                for attr, value in changes.items():
                    setattr(item, attr, value)
        self._save(self.keys.intervals, items)

    def intervals_for_equipment(self, equipment_id: str) -> list[MaintenanceInterval]:
        return [i for i in self.list_intervals() if i.equipment_id == equipment_id]

    def seed_default_intervals(
        self, equipment: Iterable[Equipment], today: date | None = None
    ) -> list[MaintenanceInterval]:
        """Attach the standard service schedule to each machine, starting from its current hours."""
        performed = (today or date.today()).isoformat()
        created = [
            MaintenanceInterval(
                id=generate_id(),
                equipment_id=e.id,
                name=name,
                interval_hours=hours,
                interval_days=days,
                last_performed_hours=e.current_hours,
                last_performed_date=performed,
            )
            for e in equipment
            for name, hours, days in DEFAULT_MAINTENANCE_INTERVALS
        ]
        self._save(self.keys.intervals, [*self.list_intervals(), *created])
        return created

    # ── consumables ────────────────────────────────────────────────────

    def list_consumables(self) -> list[Consumable]:
        return self._load(self.keys.consumables, Consumable.from_dict)

    def get_consumable(self, consumable_id: str) -> Consumable | None:
        return next((c for c in self.list_consumables() if c.id == consumable_id), None)

    def add_consumable(self, payload: ConsumablePayload) -> Consumable:
        return self.bulk_add_consumables([payload])[0]

    def bulk_add_consumables(self, payloads: Iterable[ConsumablePayload]) -> list[Consumable]:
        created = [Consumable.create(p) for p in payloads]
        self._save(self.keys.consumables, [*self.list_consumables(), *created])
        return created

    def update_consumable(self, consumable_id: str, **changes: Any) -> Consumable | None:
        items = self.list_consumables()
        updated: Consumable | None = None
        for item in items:
            if item.id == consumable_id:
                for attr, value in changes.items():
                    setattr(item, attr, value)
                item.updated_at = utc_timestamp()
                updated = item
        self._save(self.keys.consumables, items)
        return updated

    def delete_consumable(self, consumable_id: str) -> None:
        self._save(
            self.keys.consumables,
            [c for c in self.list_consumables() if c.id != consumable_id],
        )

    def deduct_consumables(self, usage: dict[str, int]) -> None:
        """Subtract used quantities (consumable id -> amount); stock never goes below 0."""
        items = self.list_consumables()
        now = utc_timestamp()
        for item in items:
            if item.id in usage:
                item.quantity = max(0, item.quantity - usage[item.id])
                item.updated_at = now
        self._save(self.keys.consumables, items)

    def low_stock_consumables(self) -> list[Consumable]:
        return [c for c in self.list_consumables() if c.is_low_stock]
