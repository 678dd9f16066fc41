"""CSV parsing, normalization and export for parts and equipment files."""

from .export import (
    equipment_to_csv,
    generate_equipment_template,
    generate_parts_template,
    parts_to_csv,
    parts_to_html,
)
from .parser import parse_equipment, parse_parts, parse_records
from .reader import CsvReadError, read_csv_text
from .tokenizer import split_records, tokenize
from .vocabulary import normalize_category, normalize_equipment_type

__all__ = [
    "CsvReadError",
    "equipment_to_csv",
    "generate_equipment_template",
    "generate_parts_template",
    "normalize_category",
    "normalize_equipment_type",
    "parse_equipment",
    "parse_parts",
    "parse_records",
    "parts_to_csv",
    "parts_to_html",
    "read_csv_text",
    "split_records",
    "tokenize",
]
