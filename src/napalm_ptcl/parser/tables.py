"""Parsers for tabular console pages (logs, rule lists, statistics)."""

from __future__ import annotations

import re
from collections.abc import Iterable

from napalm_ptcl.parser.fields import PageDocument, as_document
from napalm_ptcl.parser.html import cell_text

# Header rows start with one of these words in their first cell.
DEFAULT_HEADER_WORDS: tuple[str, ...] = ("#", "no.", "index", "name", "time", "date")

_ROW_SPLIT_RE = re.compile(r"document\.writeln\(\s*[\"']<tr>[\"']\s*\)\s*;")
_ROW_LABEL_RE = re.compile(
    r"document\.writeln\(\s*\"<td class='hd'>\s*([A-Za-z]+\s*\d+)"
)
_ROW_VALUE_RE = re.compile(
    r"document\.writeln\(\s*\"<td class='hdata'>\"\s*\+\s*\"([^\"]*)\"\s*\+\s*\"&nbsp;</td>\"\s*\)\s*;"
)
_CLIENT_COUNT_RE = re.compile(r"clientnumber\s*=\s*(\d+)\s*;")
_CLIENT_MAC_RE = re.compile(r"if\s*\(\s*i\s*==\s*\d+\s*\)[\s\S]*?mac\s*=\s*\"([^\"]+)\"")


def parse_table_rows(
    source: str | PageDocument,
    min_cols: int,
    header_words: Iterable[str] = DEFAULT_HEADER_WORDS,
) -> list[list[str]]:
    """Return the data rows of every leaf table on a page.

    A row qualifies when it has at least *min_cols* cells, its first cell is
    non-empty and that cell does not start with a header word.  ``<th>``
    rows never qualify.

    Args:
        source: Page text or parsed document.
        min_cols: Minimum number of ``<td>`` cells.
        header_words: Lower-case prefixes marking header rows.

    Returns:
        List of rows as lists of normalised cell texts.
    """
    doc = as_document(source)
    words = tuple(w.lower() for w in header_words)
    rows: list[list[str]] = []
    for tr in doc.soup.find_all("tr"):
        if tr.find("tr") is not None:
            continue
        cells = [cell_text(td) for td in tr.find_all("td", recursive=False)]
        if len(cells) < min_cols or not cells[0]:
            continue
        if cells[0].lower().startswith(words):
            continue
        rows.append(cells)
    return rows


def parse_writeln_rows(text: str) -> list[tuple[str, list[str]]]:
    """Parse statistics rows emitted with ``document.writeln``.

    Each row starts with ``document.writeln("<tr>")``, names itself in an
    ``hd`` cell (``LAN1``) and lists its figures in ``hdata`` cells::

        document.writeln("<td class='hd'>LAN1</td>");
        document.writeln("<td class='hdata'>" + "Up" + "&nbsp;</td>");

    Returns:
        ``(label, values)`` pairs in page order.
    """
    rows: list[tuple[str, list[str]]] = []
    for chunk in _ROW_SPLIT_RE.split(text)[1:]:
        label = _ROW_LABEL_RE.search(chunk)
        if not label:
            continue
        values = [v.strip() for v in _ROW_VALUE_RE.findall(chunk)]
        rows.append((re.sub(r"\s+", "", label.group(1)), values))
    return rows


def parse_wifi_clients(text: str) -> tuple[int, list[str]]:
    """Return the station count and MACs from the wireless status script.

    The page declares ``clientnumber = N;`` and then assigns each station's
    address in an ``if (i == k) { mac = "..."; }`` branch.
    """
    count_m = _CLIENT_COUNT_RE.search(text)
    macs = [m.upper() for m in _CLIENT_MAC_RE.findall(text) if m != "N/A"]
    count = int(count_m.group(1)) if count_m else 0
    if count:
        macs = macs[:count]
    return count or len(macs), macs
