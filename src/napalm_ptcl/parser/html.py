"""Base HTML parsing utilities shared across all parsers."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Tag


def parse_html(html: str, parser: str = "lxml") -> BeautifulSoup:
    """Parse an HTML string and return a BeautifulSoup document.

    Args:
        html: Raw HTML content from the router response.
        parser: Parser library to use (default: ``lxml``).

    Returns:
        Parsed BeautifulSoup document.
    """
    return BeautifulSoup(html, parser)


def normalize_text(s: str) -> str:
    """Strip surrounding whitespace and collapse internal runs.

    Non-breaking spaces count as whitespace; the console pads most cells
    with ``&nbsp;``.

    Args:
        s: Raw text extracted from an HTML element.

    Returns:
        Cleaned string with single spaces between words.
    """
    return re.sub(r"\s+", " ", s.replace("\xa0", " ")).strip()


def cell_text(tag: Tag) -> str:
    """Normalised text of *tag* with child elements space-separated."""
    return normalize_text(tag.get_text(" "))


def leaf_cells(soup: BeautifulSoup | Tag) -> list[Tag]:
    """Return every ``<td>`` that does not itself contain a nested table cell.

    Layout tables wrap whole sections in one outer cell; only leaf cells
    carry a single label or value.
    """
    return [td for td in soup.find_all("td") if td.find("td") is None]
