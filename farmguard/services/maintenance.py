from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from ..csvio.coerce import parse_date
from ..models.domain import Equipment, MaintenanceInterval
from ..storage.repository import FarmRepository

"""Maintenance interval status.

An interval is DUE once 90% of its hours (or days) have elapsed since it was
last performed and OVERDUE at 110%. The hour rule is checked first; the day
rule applies when the hour rule does not flag the interval.
"""

__all__ = [
    "MaintenanceStatus",
    "DueItem",
    "maintenance_status",
    "next_service_due",
    "due_report",
]

DUE_RATIO = 0.9
OVERDUE_RATIO = 1.1


class MaintenanceStatus(Enum):
    OK = "ok"
    DUE = "due"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class DueItem:
    equipment: Equipment
    interval: MaintenanceInterval
    status: MaintenanceStatus
    next_due: tuple[str, float | str] | None


def _classify(elapsed: float, interval: float) -> MaintenanceStatus:
    if elapsed >= interval * OVERDUE_RATIO:
        return MaintenanceStatus.OVERDUE
    if elapsed >= interval * DUE_RATIO:
        return MaintenanceStatus.DUE
    return MaintenanceStatus.OK


def _last_date(interval: MaintenanceInterval) -> date | None:
    if not interval.last_performed_date:
        return None
    # stored either as YYYY-MM-DD or a full ISO timestamp
    iso = parse_date(interval.last_performed_date[:10])
    return date.fromisoformat(iso) if iso else None


def maintenance_status(
    interval: MaintenanceInterval, current_hours: float, today: date | None = None
) -> MaintenanceStatus:
    if interval.interval_hours and interval.last_performed_hours is not None:
        status = _classify(current_hours - interval.last_performed_hours, interval.interval_hours)
        if status is not MaintenanceStatus.OK:
            return status

    last = _last_date(interval)
    if interval.interval_days and last is not None:
        days = ((today or date.today()) - last).days
        status = _classify(days, interval.interval_days)
        if status is not MaintenanceStatus.OK:
            return status

    return MaintenanceStatus.OK


def next_service_due(interval: MaintenanceInterval) -> tuple[str, float | str] | None:
    """("hours", n) or ("date", "YYYY-MM-DD"), or None when never performed."""
    if interval.interval_hours and interval.last_performed_hours is not None:
        return ("hours", interval.last_performed_hours + interval.interval_hours)
    last = _last_date(interval)
    if interval.interval_days and last is not None:
        return ("date", (last + timedelta(days=interval.interval_days)).isoformat())
    return None


def due_report(repository: FarmRepository, today: date | None = None) -> list[DueItem]:
    """Every interval that is due or overdue, overdue first."""
    equipment = {e.id: e for e in repository.list_equipment()}
    items: list[DueItem] = []
    for interval in repository.list_intervals():
        machine = equipment.get(interval.equipment_id)
        if machine is None:
            continue
        status = maintenance_status(interval, machine.current_hours, today)
        if status is MaintenanceStatus.OK:
            continue
        items.append(DueItem(machine, interval, status, next_service_due(interval)))
    items.sort(key=lambda d: (d.status is not MaintenanceStatus.OVERDUE, d.equipment.name.lower()))
    return items
