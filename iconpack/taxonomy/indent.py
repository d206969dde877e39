"""Indentation depth of taxonomy lines."""

from __future__ import annotations

TAB = "\t"
SPACE_UNIT = "    "


def measure_indent(line: str) -> int:
    """Count leading indentation units, where a unit is one tab or four spaces.

    Raises ValueError when a partial unit (one to three spaces) precedes the
    content, since the intended depth is then ambiguous.
    """
    depth = 0
    pos = 0
    while True:
        if line.startswith(TAB, pos):
            pos += len(TAB)
        elif line.startswith(SPACE_UNIT, pos):
            pos += len(SPACE_UNIT)
        else:
            break
        depth += 1

    rest = line[pos:]
    if rest[:1] == " " and rest.strip():
        stray = len(rest) - len(rest.lstrip(" "))
        raise ValueError(f"indentation has {stray} stray space(s) after {depth} unit(s)")
    return depth
