"""Sentinel value shared by every snapshot model."""

from __future__ import annotations

from typing import Final, Union

# Placeholder for a field the page did not yield.  Snapshot fields are never
# absent: they hold a parsed value or this marker.
UNKNOWN: Final[str] = "N/A"

# A boolean read from the console, or UNKNOWN when the page did not say.
Flag = Union[bool, str]
