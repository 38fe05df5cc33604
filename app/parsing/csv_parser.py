"""
app/parsing/csv_parser.py

Tolerant CSV parser for the district statistics export.

The parser never fails on a malformed data row: short rows are padded with
empty strings and long rows are truncated to the header width. Only input
without a header line is rejected.
"""

from __future__ import annotations

import re

RawRow = dict[str, str]

_LINE_SEPARATOR = re.compile(r"\r?\n")


class CSVHeaderValidationError(ValueError):
    """
    Raised when the CSV text has no header line.
    """


def split_csv_line(line: str) -> list[str]:
    """
    Split one CSV line into trimmed fields.

    Double-quoted fields may contain commas. Inside a quoted field ``""``
    stands for one literal quote.
    """

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    index = 0
    length = len(line)

    while index < length:
        char = line[index]
        if char == '"':
            if in_quotes and index + 1 < length and line[index + 1] == '"':
                current.append('"')
                index += 2
                continue
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        index += 1

    fields.append("".join(current))
    return [value.strip() for value in fields]


def parse_header(line: str) -> list[str]:
    """
    Return the ordered column names of a header line.
    """

    return [name.strip() for name in line.split(",")]


def parse_csv(text: str) -> list[RawRow]:
    """
    Parse raw CSV text into one mapping per non-blank data line.

    Raises
    ------
    CSVHeaderValidationError
        When *text* is empty or whitespace only.
    """

    stripped = text.lstrip("\ufeff").strip()
    if not stripped:
        raise CSVHeaderValidationError("CSV header row is missing.")

    lines = _LINE_SEPARATOR.split(stripped)
    header = parse_header(lines[0])
    width = len(header)

    rows: list[RawRow] = []
    for line in lines[1:]:
        if not line.strip():
            continue
        values = split_csv_line(line)
        if len(values) < width:
            values.extend([""] * (width - len(values)))
        rows.append(dict(zip(header, values[:width])))
    return rows
