"""Declarative field extraction.

A :class:`FieldDescriptor` names a snapshot field and lists the strategies
that may locate it on a page, most specific first.  :func:`extract` tries
them in order and returns the first non-empty result, coerced to the
descriptor's kind.  A field no strategy resolves falls back to its default
(``UNKNOWN`` for text and flags, ``0`` for counters); extraction never
raises.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Literal, Union

from bs4 import BeautifulSoup, Tag

from napalm_ptcl.model.values import UNKNOWN
from napalm_ptcl.parser.html import cell_text, leaf_cells, parse_html
from napalm_ptcl.parser.script import (
    ArraySchema,
    parse_schema_rows,
    parse_script_value,
)

logger = logging.getLogger(__name__)

_TRUE_TOKENS: frozenset[str] = frozenset({"1", "yes", "true", "on", "checked", "up"})


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LabeledCell:
    """Value cell following a label cell in a status table.

    Args:
        label: Label text; an exact match wins over a substring match.
        label_class: CSS class of label cells (``None`` for any ``<td>``).
            When no cell of this class matches, any ``<td>`` is tried.
        value_class: CSS class of value cells (``None`` for any ``<td>``).
        position: Which following value to read; ``1`` is the upstream
            column of two-column DSL tables.
    """

    label: str
    label_class: str | None = "hd"
    value_class: str | None = None
    position: int = 0


@dataclass(frozen=True)
class FormInput:
    """Value of a form control located by ``name``.

    Args:
        name: Control name.
        checked_value: For radios and checkboxes, the ``value`` whose checked
            state is wanted; yields ``"true"``/``"false"``.
        use_text: For selects, read the selected option's text rather than
            its value.
    """

    name: str
    checked_value: str | None = None
    use_text: bool = True


@dataclass(frozen=True)
class ScriptArrayCell:
    """One cell of a script array.

    Args:
        schema: Array name and column layout.
        column: Column to read.
        match: ``(column, value)`` pairs the row must equal.
        exclude: ``(column, value)`` pairs the row must differ from.
    """

    schema: ArraySchema
    column: str
    match: tuple[tuple[str, str], ...] = ()
    exclude: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class ScriptValue:
    """A scalar script assignment (``var X = "...";``)."""

    name: str


Strategy = Union[LabeledCell, FormInput, ScriptArrayCell, ScriptValue]
FieldKind = Literal["text", "int", "bool"]


@dataclass(frozen=True)
class FieldDescriptor:
    """How to find and type one snapshot field.

    Args:
        name: Snapshot attribute name.
        strategies: Strategies tried in order.
        kind: ``"text"``, ``"int"`` or ``"bool"``.
        default: Value when unresolved; ``None`` picks ``0`` for ints and
            ``UNKNOWN`` otherwise.
        truthy: Substrings (lower-case) that make a text value true, in
            addition to ``1``/``yes``/``true``/``on``.
    """

    name: str
    strategies: tuple[Strategy, ...]
    kind: FieldKind = "text"
    default: Any = None
    truthy: tuple[str, ...] = ("enable", "connected", "active")

    @property
    def fallback(self) -> Any:
        if self.default is not None:
            return self.default
        return 0 if self.kind == "int" else UNKNOWN


def text(name: str, *strategies: Strategy) -> FieldDescriptor:
    return FieldDescriptor(name, strategies)


def number(name: str, *strategies: Strategy) -> FieldDescriptor:
    return FieldDescriptor(name, strategies, kind="int")


def flag(name: str, *strategies: Strategy) -> FieldDescriptor:
    return FieldDescriptor(name, strategies, kind="bool")


# ---------------------------------------------------------------------------
# Page document
# ---------------------------------------------------------------------------


class PageDocument:
    """A fetched page, parsed lazily and at most once.

    Args:
        raw: Page source.
    """

    def __init__(self, raw: str | None) -> None:
        self.raw: str = raw or ""
        self._arrays: dict[ArraySchema, list[dict[str, str]]] = {}

    @cached_property
    def soup(self) -> BeautifulSoup:
        return parse_html(self.raw)

    @cached_property
    def cells(self) -> list[Tag]:
        return leaf_cells(self.soup)

    def rows(self, schema: ArraySchema) -> list[dict[str, str]]:
        """Rows of *schema*'s script array, cached per schema."""
        if schema not in self._arrays:
            self._arrays[schema] = parse_schema_rows(self.raw, schema)
        return self._arrays[schema]


def as_document(source: str | PageDocument | None) -> PageDocument:
    if isinstance(source, PageDocument):
        return source
    return PageDocument(source)


# ---------------------------------------------------------------------------
# Strategy implementations
# ---------------------------------------------------------------------------


def _has_class(tag: Tag, css_class: str | None) -> bool:
    return css_class is None or css_class in (tag.get("class") or ())


def _find_label(cells: list[Tag], label: str) -> Tag | None:
    wanted = label.lower()
    texts = [(td, cell_text(td).lower()) for td in cells]
    for td, t in texts:
        if t == wanted:
            return td
    for td, t in texts:
        if wanted in t:
            return td
    return None


def _labeled_cell(doc: PageDocument, s: LabeledCell) -> str | None:
    cell = None
    if s.label_class is not None:
        cell = _find_label([td for td in doc.cells if _has_class(td, s.label_class)], s.label)
    if cell is None:
        cell = _find_label(doc.cells, s.label)
    if cell is None:
        return None
    values: list[Tag] = []
    for td in cell.find_next_siblings("td"):
        if not _has_class(td, s.value_class):
            continue
        # A cell holding several <div>s carries several values.
        values.extend(td.find_all("div", recursive=False) or [td])
    if len(values) <= s.position:
        return None
    return cell_text(values[s.position])


def _form_input(doc: PageDocument, s: FormInput) -> str | None:
    if s.checked_value is not None:
        el = doc.soup.find("input", attrs={"name": s.name, "value": s.checked_value})
        if el is None:
            return None
        return "true" if el.has_attr("checked") else "false"
    el = doc.soup.find(["input", "select", "textarea"], attrs={"name": s.name})
    if el is None:
        return None
    if el.name == "select":
        opt = el.find("option", selected=True) or el.find("option")
        if opt is None:
            return None
        if s.use_text:
            return cell_text(opt)
        return str(opt.get("value", cell_text(opt)))
    if el.name == "textarea":
        return el.get_text()
    if str(el.get("type", "")).lower() in ("checkbox", "radio"):
        checked = el if el.has_attr("checked") else doc.soup.find(
            "input", attrs={"name": s.name, "checked": True}
        )
        if str(el.get("type", "")).lower() == "checkbox":
            return "true" if checked is not None else "false"
        return str(checked.get("value", "")) if checked is not None else None
    return str(el.get("value", ""))


def _script_array_cell(doc: PageDocument, s: ScriptArrayCell) -> str | None:
    for row in doc.rows(s.schema):
        if all(row.get(col) == val for col, val in s.match) and all(
            row.get(col) != val for col, val in s.exclude
        ):
            return row.get(s.column)
    return None


def _script_value(doc: PageDocument, s: ScriptValue) -> str | None:
    return parse_script_value(doc.raw, s.name)


_STRATEGIES: dict[type, Callable[[PageDocument, Any], str | None]] = {
    LabeledCell: _labeled_cell,
    FormInput: _form_input,
    ScriptArrayCell: _script_array_cell,
    ScriptValue: _script_value,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_int(value: str | int | None) -> int:
    """Parse a displayed counter, ignoring thousands separators.

    ``"12,345"`` and ``"12345 bytes"`` both give ``12345``.  Anything that
    does not start with digits gives ``0``.
    """
    if isinstance(value, int):
        return value
    if not value:
        return 0
    m = re.match(r"[-+]?\d+", re.sub(r"[,\s]", "", value))
    return int(m.group(0)) if m else 0


def parse_flag(value: str, truthy: Iterable[str] = ()) -> bool:
    """Interpret a displayed on/off value."""
    lowered = value.strip().lower()
    if lowered.startswith(("disable", "disconnect", "inactive", "not ", "no ", "off", "down")):
        return False
    return lowered in _TRUE_TOKENS or any(word in lowered for word in truthy)


_CLOCK_UPTIME_RE = re.compile(r"(?:(\d+)\s*days?\s*,?\s*)?(\d+):(\d+):(\d+)", re.IGNORECASE)
_UNIT_UPTIME_RE = re.compile(r"(\d+)\s*(day|hour|hr|min|sec)", re.IGNORECASE)
_UNIT_SECONDS = {"day": 86400, "hour": 3600, "hr": 3600, "min": 60, "sec": 1}


def parse_uptime_seconds(uptime_str: str | None) -> float:
    """Convert a displayed uptime to total seconds.

    Supports ``"7 days, 03:42:11"``, ``"03:42:11"`` and the unit form
    ``"2 days 3 hours 4 mins 5 secs"``.  Returns ``0.0`` when *uptime_str*
    is missing or unparseable.
    """
    if not uptime_str or uptime_str == UNKNOWN:
        return 0.0
    m = _CLOCK_UPTIME_RE.search(uptime_str)
    if m:
        days = int(m.group(1) or 0)
        hours, minutes, seconds = int(m.group(2)), int(m.group(3)), int(m.group(4))
        return float(days * 86400 + hours * 3600 + minutes * 60 + seconds)
    total = 0
    for amount, unit in _UNIT_UPTIME_RE.findall(uptime_str):
        total += int(amount) * _UNIT_SECONDS[unit.lower()]
    return float(total)


def _coerce(raw: str, descriptor: FieldDescriptor) -> Any:
    if descriptor.kind == "int":
        return parse_int(raw)
    if descriptor.kind == "bool":
        return parse_flag(raw, descriptor.truthy)
    return raw


def extract(source: str | PageDocument | None, descriptor: FieldDescriptor) -> Any:
    """Resolve *descriptor* against a page.

    Args:
        source: Raw page text or an already parsed :class:`PageDocument`.
        descriptor: Field to resolve.

    Returns:
        The coerced value, or :attr:`FieldDescriptor.fallback` when no
        strategy yields a non-empty string.
    """
    doc = as_document(source)
    for strategy in descriptor.strategies:
        try:
            raw = _STRATEGIES[type(strategy)](doc, strategy)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError):
            logger.debug(
                "Strategy %r failed for field %r", strategy, descriptor.name, exc_info=True
            )
            continue
        if raw is not None and raw.strip():
            return _coerce(raw.strip(), descriptor)
    logger.debug("Field %r unresolved; using %r", descriptor.name, descriptor.fallback)
    return descriptor.fallback


def extract_fields(
    source: str | PageDocument | None,
    descriptors: Iterable[FieldDescriptor],
) -> dict[str, Any]:
    """Resolve every descriptor against one page, parsing it once.

    Returns:
        ``{descriptor.name: value}`` in descriptor order.
    """
    doc = as_document(source)
    return {d.name: extract(doc, d) for d in descriptors}
