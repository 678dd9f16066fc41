from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from html import escape

from ..models.domain import Consumable, Equipment
from .schema import EQUIPMENT_HEADERS, PARTS_HEADERS
from .tokenizer import serialize

"""Exporters and import templates.

All functions are pure string builders. CSV output uses the import column
order, so an export can be edited and re-imported. The HTML report groups
parts by their first compatible equipment and highlights low stock rows
(quantity <= low_stock_threshold).
"""

__all__ = [
    "PARTS_TEMPLATE_EXAMPLES",
    "EQUIPMENT_TEMPLATE_EXAMPLES",
    "UNASSIGNED_GROUP",
    "generate_parts_template",
    "generate_equipment_template",
    "parts_to_csv",
    "equipment_to_csv",
    "parts_to_html",
]

UNASSIGNED_GROUP = "Unassigned"

PARTS_TEMPLATE_EXAMPLES: tuple[tuple[str, ...], ...] = (
    ("Engine Oil Filter", "RE504836", "filter", "John Deere", "JD-RE504836", "5", "2", "8R Tractor", "For 8R series tractors"),
    ("Hydraulic Filter", "RE210857", "filter", "NAPA", "NAP-2108", "3", "2", "8R Tractor, S780 Combine", ""),
    ("15W-40 Engine Oil", "TY26674", "oil", "John Deere", "", "12", "4", "", "2.5 gallon jugs"),
    ("Coolant", "TY26575", "fluid", "John Deere", "", "4", "2", "", "Pre-mixed"),
    ("Fan Belt", "R503581", "belt", "", "", "2", "1", "8R Tractor", "Check for cracking"),
)

EQUIPMENT_TEMPLATE_EXAMPLES: tuple[tuple[str, ...], ...] = (
    ("8R Tractor", "tractor", "John Deere", "8R 370", "2021", "1RW8370RXMD012345", "2021-03-15", "1250", "2026-03-15", "Front duals"),
    ("S780 Combine", "combine", "John Deere", "S780", "2019", "1H0S780SCK0765432", "2019-07-01", "2100", "", ""),
    ("Farm Truck", "truck", "Ford", "F-350", "2018", "1FT8W3BT0JEB12345", "2018-05-20", "0", "", "Diesel"),
)

_LOW_STOCK_BG = "#fdecea"
_CELL_STYLE = "padding:6px 8px;border:1px solid #ddd;text-align:left"
_HEADER_STYLE = "padding:6px 8px;border:1px solid #ddd;background:#2e7d32;color:#fff;text-align:left"
_GROUP_STYLE = "padding:8px;background:#e8f5e9;font-weight:bold;border:1px solid #ddd"


def _template(headers: Sequence[str], examples: Iterable[Sequence[str]], include_examples: bool) -> str:
    lines = [",".join(headers)]
    if include_examples:
        lines.extend(serialize(list(row)) for row in examples)
    else:
        lines.append("")
    return "\n".join(lines)


def generate_parts_template(include_examples: bool = True) -> str:
    return _template(PARTS_HEADERS, PARTS_TEMPLATE_EXAMPLES, include_examples)


def generate_equipment_template(include_examples: bool = True) -> str:
    return _template(EQUIPMENT_HEADERS, EQUIPMENT_TEMPLATE_EXAMPLES, include_examples)


def _format_number(value: float) -> str:
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    return str(value)


def _equipment_names(consumable: Consumable, names_by_id: dict[str, str]) -> list[str]:
    return [names_by_id[eid] for eid in consumable.compatible_equipment if eid in names_by_id]


def _part_cells(consumable: Consumable, names_by_id: dict[str, str]) -> list[str]:
    return [
        consumable.name,
        consumable.part_number,
        consumable.category.value,
        consumable.supplier or "",
        consumable.supplier_part_number or "",
        str(consumable.quantity),
        str(consumable.low_stock_threshold),
        ", ".join(_equipment_names(consumable, names_by_id)),
        consumable.notes or "",
    ]


def parts_to_csv(consumables: Iterable[Consumable], equipment: Iterable[Equipment] = ()) -> str:
    names_by_id = {e.id: e.name for e in equipment}
    lines = [",".join(PARTS_HEADERS)]
    for item in consumables:
        lines.append(serialize(_part_cells(item, names_by_id)))
    return "\n".join(lines)


def equipment_to_csv(equipment: Iterable[Equipment]) -> str:
    lines = [",".join(EQUIPMENT_HEADERS)]
    for e in equipment:
        lines.append(serialize([
            e.name,
            e.type.value,
            e.make,
            e.model,
            str(e.year),
            e.serial_number,
            e.purchase_date,
            _format_number(e.current_hours),
            e.warranty_expiry or "",
            e.notes or "",
        ]))
    return "\n".join(lines)


def _group_by_primary_equipment(
    consumables: Iterable[Consumable], names_by_id: dict[str, str]
) -> list[tuple[str, list[Consumable]]]:
    groups: dict[str, list[Consumable]] = {}
    unassigned: list[Consumable] = []
    for item in consumables:
        primary = next((eid for eid in item.compatible_equipment if eid in names_by_id), None)
        if primary is None:
            unassigned.append(item)
        else:
            groups.setdefault(names_by_id[primary], []).append(item)

    ordered = sorted(groups.items(), key=lambda kv: kv[0].lower())
    if unassigned:
        ordered.append((UNASSIGNED_GROUP, unassigned))
    return ordered


def parts_to_html(
    consumables: Iterable[Consumable],
    equipment: Iterable[Equipment] = (),
    *,
    generated: date | None = None,
    title: str = "Parts Inventory",
) -> str:
    names_by_id = {e.id: e.name for e in equipment}
    items = list(consumables)
    groups = _group_by_primary_equipment(items, names_by_id)
    colspan = len(PARTS_HEADERS)
    low_count = sum(1 for c in items if c.is_low_stock)

    out: list[str] = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{escape(title)}</title>",
        "</head>",
        '<body style="font-family:Arial,Helvetica,sans-serif;color:#222;margin:24px">',
        f'<h1 style="color:#2e7d32">{escape(title)}</h1>',
    ]
    if generated is not None:
        out.append(f'<p style="color:#666">Generated {generated.isoformat()}</p>')
    out.append(
        f'<p>{len(items)} parts, {low_count} low stock</p>'
    )
    out.append(
        '<div class="legend" style="margin:8px 0 16px 0">'
        f'<span style="display:inline-block;width:14px;height:14px;background:{_LOW_STOCK_BG};'
        'border:1px solid #e57373;vertical-align:middle"></span> '
        "Low stock (quantity at or below threshold)</div>"
    )
    out.append('<table style="border-collapse:collapse;width:100%">')
    out.append("<thead><tr>")
    out.extend(f'<th style="{_HEADER_STYLE}">{escape(h)}</th>' for h in PARTS_HEADERS)
    out.append("</tr></thead>")
    out.append("<tbody>")

    for gi, (group_name, members) in enumerate(groups):
        if gi > 0:
            out.append(
                f'<tr class="spacer"><td colspan="{colspan}" style="height:14px;border:none"></td></tr>'
            )
        out.append(
            f'<tr class="group"><td colspan="{colspan}" style="{_GROUP_STYLE}">'
            f"{escape(group_name)} ({len(members)})</td></tr>"
        )
        for item in members:
            cells = "".join(
                f'<td style="{_CELL_STYLE}">{escape(v)}</td>' for v in _part_cells(item, names_by_id)
            )
            if item.is_low_stock:
                out.append(f'<tr class="low-stock" style="background:{_LOW_STOCK_BG}">{cells}</tr>')
            else:
                out.append(f"<tr>{cells}</tr>")

    out.append("</tbody>")
    out.append("</table>")
    out.append("</body>")
    out.append("</html>")
    return "\n".join(out)
