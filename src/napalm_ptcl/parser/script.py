"""Extraction of values embedded in the console's inline JavaScript.

Status pages ship their data as script literals rather than markup::

    var ary_wan_ptm8 = [["Yes", "Yes", "1", "10.0.0.1", "8.8.8.8", "8.8.4.4"]];
    var DslMode = "VDSL2";
    temp = "192.168.10.2,192.168.10.3"; var arpIPaddress = temp.split(',');

Arrays are read against an :class:`ArraySchema` naming the variable and its
row layout, so a firmware revision that renames or reshapes an array is a
profile change rather than a parser change.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_QUOTED = r'"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\''
# A quoted string, optionally followed by ``+ "more"`` concatenations.
_ELEMENT_RE = re.compile(rf"(?:{_QUOTED})(?:\s*\+\s*(?:{_QUOTED}))*")
_PIECE_RE = re.compile(_QUOTED)
# Quoted strings and single brackets are whole tokens; a stray quote stands alone.
_TOKEN_RE = re.compile(rf"{_QUOTED}|[\[\]]|[^\"'\[\]]+|[\"']")


@dataclass(frozen=True)
class ArraySchema:
    """Name and column layout of a two-dimensional script array.

    Args:
        name: JavaScript variable name.
        columns: Column names in row order.  Rows of any other width are
            ignored.
    """

    name: str
    columns: tuple[str, ...]

    @property
    def width(self) -> int:
        return len(self.columns)

    def index(self, column: str) -> int:
        """Position of *column* in a row.

        Raises:
            ValueError: If the schema has no such column.
        """
        return self.columns.index(column)


def _unquote(literal: str) -> str:
    body = literal[1:-1]
    return re.sub(r"\\(.)", r"\1", body)


def _join_element(element: str) -> str:
    return "".join(_unquote(piece) for piece in _PIECE_RE.findall(element))


def _row_sources(text: str, start: int) -> list[str]:
    """Source of each inner row of the array literal opening at *start*.

    Brackets inside quoted strings do not count.  Scanning stops at the
    bracket closing the outer array, or at the end of *text*.
    """
    rows: list[str] = []
    row: list[str] = []
    depth = 0
    for tok in _TOKEN_RE.finditer(text, start):
        piece = tok.group(0)
        if piece == "[":
            depth += 1
            if depth == 2:
                row = []
                continue
        elif piece == "]":
            depth -= 1
            if depth == 0:
                break
            if depth == 1:
                rows.append("".join(row))
                continue
        if depth >= 2:
            row.append(piece)
    return rows


def parse_script_array(text: str, name: str, width: int | None = None) -> list[list[str]]:
    """Return the rows of ``var <name> = [[...], ...];`` found in *text*.

    Adjacent string concatenations (``"0" + "days"``) are folded into one
    cell.  Rows whose length differs from *width* (when given) are skipped.

    Args:
        text: Page source.
        name: Array variable name.
        width: Expected row length.

    Returns:
        List of rows, each a list of strings.  Empty when the array is absent.
    """
    m = re.search(rf"var\s+{re.escape(name)}\s*=\s*(?=\[)", text)
    if not m:
        return []
    rows: list[list[str]] = []
    for row in _row_sources(text, m.end()):
        cells = [_join_element(el.group(0)) for el in _ELEMENT_RE.finditer(row)]
        if width is None or len(cells) == width:
            rows.append(cells)
    return rows


def parse_schema_rows(text: str, schema: ArraySchema) -> list[dict[str, str]]:
    """Return the rows of *schema*'s array as ``{column: value}`` dicts."""
    return [
        dict(zip(schema.columns, row))
        for row in parse_script_array(text, schema.name, schema.width)
    ]


def parse_script_value(text: str, name: str) -> str | None:
    """Return the value of a scalar assignment such as ``var X = "...";``.

    Quoted values are unquoted; bare tokens (``X = 3;``) are returned as is.
    """
    m = re.search(
        rf"(?<![\w.]){re.escape(name)}\s*=\s*(?:({_QUOTED})|([-\w.:]+))\s*;",
        text,
    )
    if not m:
        return None
    if m.group(1) is not None:
        return _unquote(m.group(1))
    return m.group(2)


def parse_script_list(text: str, name: str) -> list[str]:
    """Return the items of ``tmp = "a,b"; var <name> = tmp.split(',');``.

    Empty items are dropped.
    """
    m = re.search(
        r"(\w+)\s*=\s*\"([^\"]*)\"\s*;\s*"
        rf"var\s+{re.escape(name)}\s*=\s*\1\.split\(\s*['\"](.+?)['\"]\s*\)",
        text,
    )
    if not m:
        return []
    return [item.strip() for item in m.group(2).split(m.group(3)) if item.strip()]
