"""Field-level diff of a form before and after a merge."""

from __future__ import annotations

from collections.abc import Mapping

from napalm_ptcl.vendor.ptcl.mappings import SECRET_FIELD_MARKERS

MASK: str = "********"


def is_secret(field: str) -> bool:
    """True for fields carrying passwords or keys."""
    lowered = field.lower()
    return any(marker in lowered for marker in SECRET_FIELD_MARKERS)


def diff_form_fields(
    current: Mapping[str, str],
    merged: Mapping[str, str],
) -> dict[str, tuple[str, str]]:
    """Return ``{field: (current, new)}`` for every field *merged* changes.

    Fields absent from *current* show ``""`` as their current value.
    Secret values are masked on both sides.

    Args:
        current: Fields harvested from the page.
        merged: Fields about to be submitted.
    """
    changes: dict[str, tuple[str, str]] = {}
    for name, new in merged.items():
        old = current.get(name, "")
        if name in current and old == new:
            continue
        if is_secret(name):
            changes[name] = (MASK if old else "", MASK)
        else:
            changes[name] = (old, new)
    return changes


def render_changes(changes: Mapping[str, tuple[str, str]]) -> str:
    """One ``field: old -> new`` line per change, sorted by field name."""
    return "\n".join(
        f"{name}: {old!r} -> {new!r}" for name, (old, new) in sorted(changes.items())
    )
