"""Form harvesting for the read-merge-submit write protocol.

The console's CGI handlers replace a whole settings group with whatever the
POST carries, so a write must resend every field the browser would send.
:func:`harvest_form` collects exactly that set from the current page.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from bs4 import Tag

from napalm_ptcl.client.errors import RouterParseError
from napalm_ptcl.parser.fields import PageDocument, as_document
from napalm_ptcl.parser.html import cell_text

logger = logging.getLogger(__name__)

FieldList = list[tuple[str, str]]

_CONTROLS: list[str] = ["input", "select", "textarea"]
_NOT_SUBMITTED: frozenset[str] = frozenset({"submit", "button", "image", "reset", "file"})


@dataclass(frozen=True)
class FormSchema:
    """Where a settings form lives and how to recognise it.

    Args:
        page: Page that renders the form (GET).
        action: Path the form posts to.
        name: ``name``/``id`` of the ``<form>``, when it has one.
        key_field: A control name only this form contains; used when the
            form is unnamed.
        defaults: Values for fields a firmware revision may omit from the
            page.  Applied only where the page has no such field.
    """

    page: str
    action: str
    name: str | None = None
    key_field: str | None = None
    defaults: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FormInventory:
    """A form found while surveying a page."""

    name: str
    action: str
    method: str
    fields: dict[str, str]


def _find_form(doc: PageDocument, schema: FormSchema) -> Tag | None:
    forms = doc.soup.find_all("form")
    if schema.name:
        for form in forms:
            if schema.name in (form.get("name"), form.get("id")):
                return form
    if schema.key_field:
        for form in forms:
            if any(c.get("name") == schema.key_field for c in _controls(form)):
                return form
        # Malformed table markup can leave the controls outside the form.
        for form in forms:
            if any(c.get("name") == schema.key_field for c in _trailing_controls(form)):
                return form
    return forms[0] if forms and not (schema.name or schema.key_field) else None


def _controls(form: Tag) -> list[Tag]:
    return form.find_all(_CONTROLS)


def _trailing_controls(form: Tag) -> list[Tag]:
    """Controls after *form*'s start tag up to the next form."""
    found: list[Tag] = []
    for el in form.find_all_next([*_CONTROLS, "form"]):
        if el.name == "form":
            break
        found.append(el)
    return found


def _control_value(el: Tag) -> str | None:
    """Value the browser would submit for *el*, or ``None`` if it is skipped."""
    if el.name == "select":
        opt = el.find("option", selected=True) or el.find("option")
        if opt is None:
            return ""
        return str(opt.get("value", cell_text(opt)))
    if el.name == "textarea":
        return el.get_text()
    kind = str(el.get("type", "text")).lower()
    if kind in _NOT_SUBMITTED:
        return None
    if kind in ("checkbox", "radio"):
        if not el.has_attr("checked"):
            return None
        return str(el.get("value", "on"))
    return str(el.get("value", ""))


def _collect(controls: list[Tag]) -> FieldList:
    fields: FieldList = []
    for el in controls:
        name = el.get("name")
        if not name or el.has_attr("disabled"):
            continue
        value = _control_value(el)
        if value is None:
            continue
        fields.append((str(name), value))
    return fields


def field_values(fields: Iterable[tuple[str, str]]) -> dict[str, str]:
    """``{name: value}`` view of *fields*; the first of repeated names wins."""
    values: dict[str, str] = {}
    for name, value in fields:
        values.setdefault(name, value)
    return values


def harvest_form(source: str | PageDocument, schema: FormSchema) -> FieldList:
    """Collect every submittable field of *schema*'s form, in document order.

    Text, hidden and password inputs give their ``value``; checked radios
    and checkboxes give theirs (unchecked ones are omitted, as a browser
    does); selects give the selected option's value, else the first
    option's; textareas give their text.  Buttons are skipped.  Controls
    sharing a name are all kept, as the browser sends each of them.

    Args:
        source: Page text or parsed document.
        schema: Form to harvest.

    Returns:
        Ordered ``(field, value)`` pairs.

    Raises:
        RouterParseError: If the page does not contain the form.
    """
    doc = as_document(source)
    form = _find_form(doc, schema)
    if form is None:
        raise RouterParseError(
            f"Form {schema.name or schema.key_field!r} not found on {schema.page!r}"
        )
    controls = _controls(form) or _trailing_controls(form)
    fields = _collect(controls)
    logger.debug("Harvested %d fields from %s", len(fields), schema.page)
    return fields


def merge_form_fields(
    current: Iterable[tuple[str, str]],
    defaults: Mapping[str, str],
    delta: Mapping[str, str],
    fixed: Mapping[str, str],
) -> FieldList:
    """Overlay *defaults* (missing fields only), *delta* and *fixed*.

    Every field of *current* survives with its value unless *delta* or
    *fixed* names it.  A named field replaces the first occurrence of that
    name and is appended when the form has none; later repeats keep their
    values.
    """
    merged = list(current)
    present = {name for name, _ in merged}
    merged.extend((name, value) for name, value in defaults.items() if name not in present)
    for overlay in (delta, fixed):
        for name, value in overlay.items():
            index = next((i for i, (n, _) in enumerate(merged) if n == name), None)
            if index is None:
                merged.append((name, value))
            else:
                merged[index] = (name, value)
    return merged


def list_forms(source: str | PageDocument) -> list[FormInventory]:
    """Survey every form on a page with its current field values."""
    doc = as_document(source)
    inventory: list[FormInventory] = []
    for index, form in enumerate(doc.soup.find_all("form")):
        controls = _controls(form) or _trailing_controls(form)
        inventory.append(
            FormInventory(
                name=str(form.get("name") or form.get("id") or f"form{index}"),
                action=str(form.get("action", "")),
                method=str(form.get("method", "get")).upper(),
                fields=field_values(_collect(controls)),
            )
        )
    return inventory
