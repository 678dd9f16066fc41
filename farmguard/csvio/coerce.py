from __future__ import annotations

import re
import warnings
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import pandas as pd

from ..models.domain import ConsumableCategory, EquipmentType
from .vocabulary import normalize_category, normalize_equipment_type

"""Cell coercion for the row parser.

Every coercer takes the trimmed cell text and a RowContext and returns
``(value, warning)``. A warning never invalidates the row: numeric cells that
are not numbers or are negative fall back to a documented default, and
unrecognized vocabulary falls back to "other". Empty cells take the default
silently.

Dates are normalized to ISO ``YYYY-MM-DD``. ``YYYY-MM-DD`` and ``MM/DD/YYYY``
are parsed strictly; anything else goes through ``pandas.to_datetime``.
"""

__all__ = [
    "RowContext",
    "Coercer",
    "parse_int",
    "parse_float",
    "parse_date",
    "text",
    "optional_text",
    "int_or_default",
    "float_or_default",
    "year_or_current",
    "category_or_other",
    "equipment_type_or_other",
    "date_or_today",
    "optional_date",
    "local_today",
]

_INT_RE = re.compile(r"^[+-]?\d+")
_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_US_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


@dataclass(frozen=True)
class RowContext:
    row_number: int
    today: date


Coercer = Callable[[str, RowContext], tuple[Any, str | None]]


def _clean_number(raw: str) -> str:
    # thousands separators only survive inside quoted cells
    return raw.strip().replace(",", "").replace("_", "")


def parse_int(raw: str) -> int | None:
    """Leading-integer parse: "12 jugs" -> 12, "3.9" -> 3, "abc" -> None."""
    m = _INT_RE.match(_clean_number(raw))
    return int(m.group(0)) if m else None


def parse_float(raw: str) -> float | None:
    m = _FLOAT_RE.match(_clean_number(raw))
    return float(m.group(0)) if m else None


def parse_date(raw: str) -> str | None:
    """Normalize a date string to ISO format, or None when unparseable."""
    value = raw.strip()
    if not value:
        return None

    m = _ISO_DATE_RE.match(value)
    if m:
        return _safe_iso(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    m = _US_DATE_RE.match(value)
    if m:
        return _safe_iso(int(m.group(3)), int(m.group(1)), int(m.group(2)))

    with warnings.catch_warnings():
        # format inference chatter for free-form strings
        warnings.simplefilter("ignore", UserWarning)
        try:
            ts = pd.to_datetime(value, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if ts is None or pd.isna(ts):
        return None
    return ts.date().isoformat()


def _safe_iso(year: int, month: int, day: int) -> str | None:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def text(raw: str, ctx: RowContext) -> tuple[str, str | None]:
    return raw, None


def optional_text(raw: str, ctx: RowContext) -> tuple[str | None, str | None]:
    return (raw or None), None


def int_or_default(label: str, default: int) -> Coercer:
    def coerce(raw: str, ctx: RowContext) -> tuple[int, str | None]:
        if not raw:
            return default, None
        value = parse_int(raw)
        if value is None or value < 0:
            return default, f'Row {ctx.row_number}: Invalid {label} "{raw}", using {default}'
        return value, None
    return coerce


def float_or_default(label: str, default: float) -> Coercer:
    def coerce(raw: str, ctx: RowContext) -> tuple[float, str | None]:
        if not raw:
            return default, None
        value = parse_float(raw)
        if value is None or value < 0:
            return default, f'Row {ctx.row_number}: Invalid {label} "{raw}", using {default:g}'
        return value, None
    return coerce


def year_or_current(raw: str, ctx: RowContext) -> tuple[int, str | None]:
    current = ctx.today.year
    if not raw:
        return current, None
    value = parse_int(raw)
    if value is None or value < 0:
        return current, f'Row {ctx.row_number}: Invalid year "{raw}", using {current}'
    return value, None


def category_or_other(raw: str, ctx: RowContext) -> tuple[ConsumableCategory, str | None]:
    if not raw:
        return ConsumableCategory.OTHER, None
    category = normalize_category(raw)
    if category is None:
        return ConsumableCategory.OTHER, f'Row {ctx.row_number}: Unknown category "{raw}", using "other"'
    return category, None


def equipment_type_or_other(raw: str, ctx: RowContext) -> tuple[EquipmentType, str | None]:
    if not raw:
        return EquipmentType.OTHER, None
    eq_type = normalize_equipment_type(raw)
    if eq_type is None:
        return EquipmentType.OTHER, f'Row {ctx.row_number}: Unknown type "{raw}", using "other"'
    return eq_type, None


def date_or_today(label: str) -> Coercer:
    def coerce(raw: str, ctx: RowContext) -> tuple[str, str | None]:
        today = ctx.today.isoformat()
        if not raw:
            return today, None
        parsed = parse_date(raw)
        if parsed is None:
            return today, f'Row {ctx.row_number}: Invalid {label} "{raw}", using today ({today})'
        return parsed, None
    return coerce


def optional_date(label: str) -> Coercer:
    def coerce(raw: str, ctx: RowContext) -> tuple[str | None, str | None]:
        if not raw:
            return None, None
        parsed = parse_date(raw)
        if parsed is None:
            return None, f'Row {ctx.row_number}: Invalid {label} "{raw}", ignoring'
        return parsed, None
    return coerce


def local_today() -> date:
    return datetime.now().date()
