from __future__ import annotations

from datetime import date

from farmguard.csvio.parser import parse_equipment, parse_parts, resolve_headers
from farmguard.csvio.schema import EQUIPMENT_SCHEMA, PARTS_SCHEMA
from farmguard.models.domain import ConsumableCategory, EquipmentType

TODAY = date(2024, 6, 15)


def test_parse_parts_basic_scenario():
    content = "Part Name,Part Number,Category,Quantity\nOil Filter,RE123,filter,5\nOil Filter,RE123,Filters,3\n"
    result = parse_parts(content)
    assert result.success is True
    assert result.errors == []
    assert len(result.records) == 2
    assert [r.row_number for r in result.records] == [2, 3]
    assert all(r.is_valid for r in result.records)
    assert [r.quantity for r in result.records] == [5, 3]
    assert all(r.category is ConsumableCategory.FILTER for r in result.records)
    # columns absent from the header take defaults
    assert result.records[0].low_stock_threshold == 2
    assert result.records[0].supplier is None


def test_parse_parts_missing_part_number_column():
    content = "Part Name,Category,Quantity\nOil Filter,filter,5\n"
    result = parse_parts(content)
    assert result.success is False
    assert result.records == []
    assert result.errors == ["Missing required columns: Part Name and Part Number"]


def test_parse_parts_empty_file():
    result = parse_parts("\n  \n")
    assert result.success is False
    assert result.records == []
    assert result.errors == ["File is empty"]


def test_parse_parts_header_only():
    result = parse_parts("Part Name,Part Number\n")
    assert result.success is False
    assert result.records == []
    assert result.errors == ["No data rows found in the file"]


def test_parse_parts_missing_required_value_marks_row_invalid():
    content = "Part Name,Part Number,Quantity\n,RE1,4\nBelt,,2\nFilter,RE3,1\n"
    result = parse_parts(content)
    assert result.success is True
    first, second, third = result.records
    assert first.is_valid is False and first.validation_error == "Part name is required"
    assert second.is_valid is False and second.validation_error == "Part number is required"
    assert third.is_valid is True and third.validation_error is None
    # invalid rows are kept, not dropped
    assert len(result.invalid_records) == 2


def test_parse_parts_all_rows_invalid_is_not_success():
    result = parse_parts("Part Name,Part Number\n,RE1\n,RE2\n")
    assert result.success is False
    assert len(result.records) == 2


def test_parse_parts_warnings_do_not_invalidate_rows():
    content = "Part Name,Part Number,Category,Quantity,Low Stock Threshold\nGizmo,G1,Widgets,lots,-1\n"
    result = parse_parts(content)
    record = result.records[0]
    assert record.is_valid is True
    assert record.category is ConsumableCategory.OTHER
    assert record.quantity == 0
    assert record.low_stock_threshold == 2
    assert len(result.errors) == 3
    assert any("Widgets" in e for e in result.errors)
    assert all(e.startswith("Row 2:") for e in result.errors)


def test_parse_parts_lubricants_alias_has_no_warning():
    result = parse_parts("Part Name,Part Number,Category\nGrease,G1,Lubricants\n")
    assert result.records[0].category is ConsumableCategory.OIL
    assert result.errors == []


def test_parse_parts_quoted_equipment_and_short_rows():
    content = 'Part Name,Part Number,Equipment,Notes\nFilter,RE1,"Tractor, Combine"\n'
    record = parse_parts(content).records[0]
    assert record.equipment_names == ["Tractor", "Combine"]
    assert record.notes is None


def test_parse_parts_multiline_notes_keep_row_numbers_logical():
    content = 'Part Name,Part Number,Notes\nFilter,RE1,"first\nsecond"\nBelt,RE2,\n'
    result = parse_parts(content)
    assert [r.row_number for r in result.records] == [2, 3]
    assert result.records[0].notes == "first\nsecond"


def test_parse_parts_inch_marks_in_notes_keep_every_row():
    content = 'Part Name,Part Number,Quantity,Notes\nBelt,B1,2,12" belt\nFilter,F1,3,ok\nHose,H1,1,3" hose\n'
    result = parse_parts(content)
    assert [r.part_number for r in result.records] == ["B1", "F1", "H1"]
    assert [r.row_number for r in result.records] == [2, 3, 4]
    assert [r.quantity for r in result.records] == [2, 3, 1]


def test_resolve_headers_fuzzy_rules():
    header = ["Part Name", "Part Number", "Supplier", "Supplier Part Number", "Qty On Hand", "Alert Level", "Compatible Equipment"]
    index = resolve_headers(header, PARTS_SCHEMA)
    assert index["name"] == 0
    assert index["part_number"] == 1
    assert index["supplier"] == 2
    assert index["supplier_part_number"] == 3
    assert index["quantity"] == 4
    assert index["low_stock_threshold"] == 5
    assert index["equipment"] == 6
    assert index["category"] == -1
    assert index["notes"] == -1


def test_resolve_headers_equipment_name_skips_serial_and_model_columns():
    header = ["Serial Number", "Model Name", "Equipment Name", "Make"]
    index = resolve_headers(header, EQUIPMENT_SCHEMA)
    assert index["name"] == 2
    assert index["serial_number"] == 0
    assert index["model"] == 1
    assert index["make"] == 3


def test_parse_equipment_full_row():
    content = (
        "Name,Type,Make,Model,Year,Serial Number,Purchase Date,Current Hours,Warranty Expiry,Notes\n"
        "8R Tractor,Tractors,John Deere,8R 370,2021,SN1,03/15/2021,1250.5,2026-03-15,duals\n"
    )
    result = parse_equipment(content, today=TODAY)
    assert result.success is True
    e = result.records[0]
    assert e.type is EquipmentType.TRACTOR
    assert e.year == 2021
    assert e.purchase_date == "2021-03-15"
    assert e.current_hours == 1250.5
    assert e.warranty_expiry == "2026-03-15"
    assert e.notes == "duals"


def test_parse_equipment_defaults_and_warnings():
    content = "Name,Type,Year,Purchase Date,Current Hours,Warranty\nOld Truck,hovercraft,unknown,someday,n/a,never\n"
    result = parse_equipment(content, today=TODAY)
    e = result.records[0]
    assert e.is_valid is True
    assert e.type is EquipmentType.OTHER
    assert e.year == 2024
    assert e.purchase_date == "2024-06-15"
    assert e.current_hours == 0.0
    assert e.warranty_expiry is None
    assert len(result.errors) == 5


def test_parse_equipment_missing_name_column():
    result = parse_equipment("Type,Make\ntractor,Deere\n", today=TODAY)
    assert result.success is False
    assert result.errors == ["Missing required column: Name"]


def test_parse_equipment_blank_name_invalid():
    result = parse_equipment("Name,Type\n,tractor\n", today=TODAY)
    assert result.success is False
    assert result.records[0].validation_error == "Equipment name is required"


def test_record_count_matches_non_blank_lines():
    content = "Part Name,Part Number\nA,1\n\nB,2\n   \nC,3\n"
    result = parse_parts(content)
    assert len(result.records) == 3
