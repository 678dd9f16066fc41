from __future__ import annotations

"""CSV line tokenizer.

``tokenize`` splits one logical CSV record into trimmed fields, honoring
quoted fields, doubled-quote escapes and commas inside quotes.
``split_records`` cuts file content into logical records, keeping newlines
that sit inside a quoted field.

Both are lenient on purpose: malformed quoting is never rejected. An
unterminated quote inside a record simply runs to the end of that record, and
a quote that never closes before end of file makes the remainder fall back to
plain physical line splitting so a single stray quote cannot swallow the rest
of the file.
"""

__all__ = [
    "tokenize",
    "split_records",
    "escape_cell",
    "serialize",
]

_NEEDS_QUOTING = (",", '"', "\n", "\r")


def tokenize(line: str) -> list[str]:
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        char = line[i]
        if in_quotes:
            if char == '"':
                if i + 1 < n and line[i + 1] == '"':
                    current.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(char)
        elif char == '"':
            in_quotes = True
        elif char == ",":
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current).strip())
    return fields


def split_records(content: str) -> list[str]:
    """Split content into logical records, dropping blank ones.

    CRLF and LF are both accepted. A quote only opens a quoted field when it
    is the first non-blank character of a field, so a bare inch mark such as
    ``12" belt`` never spans lines. Inside a quoted field the doubled-quote
    rule from ``tokenize`` applies and an escaped quote never closes it.
    """
    text = content.replace("\r\n", "\n").replace("\r", "\n")
    records: list[str] = []
    start = 0
    in_quotes = False
    at_field_start = True
    i = 0
    n = len(text)
    while i < n:
        char = text[i]
        if in_quotes:
            if char == '"':
                if i + 1 < n and text[i + 1] == '"':
                    i += 1
                else:
                    in_quotes = False
        elif char == '"' and at_field_start:
            in_quotes = True
            at_field_start = False
        elif char == ",":
            at_field_start = True
        elif char == "\n":
            records.append(text[start:i])
            start = i + 1
            at_field_start = True
        elif char not in " \t":
            at_field_start = False
        i += 1

    if in_quotes:
        # quote never closed: treat the rest as ordinary lines
        records.extend(text[start:].split("\n"))
    else:
        records.append(text[start:])

    return [r for r in records if r.strip()]


def escape_cell(value: str) -> str:
    """Quote-wrap a cell containing a comma, quote or line break."""
    if any(ch in value for ch in _NEEDS_QUOTING):
        return '"' + value.replace('"', '""') + '"'
    return value


def serialize(fields: list[str]) -> str:
    return ",".join(escape_cell(f) for f in fields)
