from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from ..models.parsed import ProcessedPart

"""Equipment name matcher.

Each free-text name is compared case-insensitively with existing equipment
names using three rules in order: exact, existing name contained in the
input, input contained in the existing name. The first equipment (collection
order) satisfying any rule wins; there is no tie-break between several
substring candidates. Matched ids are de-duplicated, unmatched names are kept
verbatim (trimmed) and are not de-duplicated.
"""

__all__ = [
    "NamedEquipment",
    "MatchResult",
    "match_equipment_names",
    "resolve_part_equipment",
]


class NamedEquipment(Protocol):
    id: str
    name: str


@dataclass(frozen=True)
class MatchResult:
    matched: list[str]
    unmatched: list[str]


def _find(name: str, candidates: list[tuple[str, str]]) -> str | None:
    for eq_id, eq_name in candidates:
        if eq_name == name or eq_name in name or name in eq_name:
            return eq_id
    return None


def match_equipment_names(
    names: Iterable[str], existing_equipment: Iterable[NamedEquipment]
) -> MatchResult:
    # blank equipment names would substring-match everything
    candidates = [(e.id, e.name.strip().lower()) for e in existing_equipment if e.name.strip()]
    matched: list[str] = []
    unmatched: list[str] = []

    for raw in names:
        name = raw.strip()
        if not name:
            continue
        found = _find(name.lower(), candidates)
        if found is None:
            unmatched.append(name)
        elif found not in matched:
            matched.append(found)

    return MatchResult(matched=matched, unmatched=unmatched)


def resolve_part_equipment(
    parts: list[ProcessedPart], existing_equipment: Iterable[NamedEquipment]
) -> list[ProcessedPart]:
    """Fill matched_equipment_ids / unmatched_equipment on merged parts in place."""
    equipment = list(existing_equipment)
    for part in parts:
        result = match_equipment_names(part.equipment_names, equipment)
        part.matched_equipment_ids = result.matched
        part.unmatched_equipment = result.unmatched
    return parts
