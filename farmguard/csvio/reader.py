from __future__ import annotations

from pathlib import Path

"""CSV file reader.

Spreadsheet apps hand us UTF-8 (with or without BOM) or Windows-1252. The
reader strips the BOM, tries UTF-8 first and falls back to cp1252, and
rejects files that are missing or blank before they reach the parser.
"""

__all__ = [
    "CsvReadError",
    "read_csv_text",
    "decode_csv_bytes",
]

_FALLBACK_ENCODINGS = ("utf-8", "cp1252")


class CsvReadError(Exception):
    """Raised when a CSV file cannot be read or holds no content."""


def decode_csv_bytes(raw: bytes) -> str:
    if raw.startswith(b"\xef\xbb\xbf"):
        raw = raw[3:]
    for encoding in _FALLBACK_ENCODINGS:
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError:
            continue
        return text.lstrip("\ufeff")
    # cp1252 leaves a few bytes undefined
    return raw.decode("utf-8", errors="replace")


def read_csv_text(path: Path) -> str:
    """Return the decoded text of a CSV file.

    Raises:
        CsvReadError: file missing, unreadable, or blank
    """
    if not path.exists():
        raise CsvReadError(f"file not found: {path}")
    if not path.is_file():
        raise CsvReadError(f"not a file: {path}")
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise CsvReadError(f"unable to read {path}: {e}") from e

    text = decode_csv_bytes(raw)
    if not text.strip():
        raise CsvReadError(f"file is empty: {path.name}")
    return text
