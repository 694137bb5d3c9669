from __future__ import annotations

import re

"""Delimited-text (CSV export) parser.

The spreadsheet export is read line by line:

- lines are split on ``\\n`` (a preceding ``\\r`` is tolerated)
- a line that is blank after ``strip()`` is dropped before any quote handling
- ``,`` separates fields unless inside a quoted span
- ``"`` opens / closes a span and is not kept; ``""`` inside a span is a literal ``"``
- an unmatched quote stays open until end of line (no continuation onto the next line)

The stdlib ``csv`` module is not used because it joins quoted line breaks and
keeps quotes that appear mid-field, both of which change row positions and
therefore row identity.
"""

__all__ = [
    "parse",
    "parse_line",
]

_LINE_BREAK = re.compile(r"\r?\n")
QUOTE = '"'
DELIMITER = ","


def parse_line(line: str) -> list[str]:
    """Split a single line into fields.

    The last field is always flushed, so ``"a,"`` yields ``["a", ""]``.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == QUOTE:
            if in_quotes and i + 1 < n and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif ch == DELIMITER and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    fields.append("".join(current))
    return fields


def parse(text: str) -> list[list[str]]:
    """Parse CSV text into rows of string fields.

    Returns one list per non-blank line, in input order. Empty input returns ``[]``.
    """
    rows: list[list[str]] = []
    if not text:
        return rows
    for line in _LINE_BREAK.split(text):
        # 空行 (空白のみ含む) は行として扱わない
        if line.strip() == "":
            continue
        rows.append(parse_line(line))
    return rows
