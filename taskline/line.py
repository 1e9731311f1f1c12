"""Split a list line into its structural fields and put it back together."""

from __future__ import annotations

import re

from .models import LineStructure

# indentation, list marker, checkbox, leading date stamp, remainder
RE_LINE = re.compile(
    r"^(?P<indentation>\s*)?"
    r"(?:(?P<list_marker>[*-]|\d+\.)\s*)?"
    r"(?:(?P<checkbox>\[.?\])\s+)?"
    r"(?:(?P<date_prefix>(?:\d\d\d\d-)?\d\d-\d\d):\s*)?"
    r"(?P<remainder>.+)"
)


def parse_line(line: str) -> LineStructure:
    """Tokenize a single line. Lines that do not match become remainder only."""
    m = RE_LINE.match(line)
    if not m:
        return LineStructure(remainder=line)
    return LineStructure(
        indentation=m.group("indentation") or "",
        list_marker=m.group("list_marker") or "",
        checkbox=m.group("checkbox") or "",
        date_prefix=m.group("date_prefix") or "",
        remainder=m.group("remainder") or "",
    )


def line_to_string(line: LineStructure) -> str:
    """Reassemble a line with one separator after each present field."""

    def space(item: str, sep: str = " ") -> str:
        return f"{item}{sep}" if item else ""

    return (
        f"{line.indentation}{space(line.list_marker)}{space(line.checkbox)}"
        f"{space(line.date_prefix, ': ')}{line.remainder}"
    )
