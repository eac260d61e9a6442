"""CSV parsing for published Google Sheet exports.

Quoted fields may hold commas, escaped quotes ("") and line breaks. An
unterminated quote is closed at the end of its line, so one stray quote
damages a single row instead of swallowing the rest of the sheet. Parsing
never fails; checking a row against its header is left to the caller.
"""

import csv
import io
from typing import Iterator, List, Tuple


def _reader(source) -> Iterator[List[str]]:
    # strict=False: an open quote at end of input becomes an implicit close
    return csv.reader(source, skipinitialspace=True, strict=False)


def parse_line(line: str) -> List[str]:
    """Split one CSV line into trimmed, unquoted field values."""
    for row in _reader(io.StringIO(line, newline="")):
        return [cell.strip() for cell in row]
    return []


def parse_numbered_rows(text: str) -> List[Tuple[int, List[str]]]:
    """Split a CSV document into (sheet row number, cells), skipping blank rows.

    Row numbers count every record, blank ones included, so they match the
    spreadsheet's row labels even when a cell spans several lines.
    """
    lines = text.lstrip("\ufeff").split("\n")
    rows = []
    row_number = 0
    i = 0
    while i < len(lines):
        # A quoted field may continue on the next lines; "" keeps the count even
        end = i
        chunk = lines[i]
        while chunk.count('"') % 2 and end + 1 < len(lines):
            end += 1
            chunk += "\n" + lines[end]
        if chunk.count('"') % 2:
            # Quote never closes: it ends with its own line
            end = i
            chunk = lines[i]

        row_number += 1
        cells = parse_line(chunk)
        if any(cells):
            rows.append((row_number, cells))
        i = end + 1
    return rows


def parse_rows(text: str) -> List[List[str]]:
    """Split a whole CSV document into rows, skipping blank lines.

    Line breaks inside quoted fields stay part of the field.
    """
    return [cells for _, cells in parse_numbered_rows(text)]
