"""Derive a presentable location name from a ledger description."""

from __future__ import annotations

import re

from .constants import (
    CATEGORY_KEYWORD_PREFIX_RX,
    COLON_LOCATION_RX,
    COLUMN_GAP_RX,
    DATE_RANGE_PREFIX_RX,
    DEFAULT_LOCATION,
)


def format_location_name(name: str | None) -> str:
    """Title-case every word and collapse whitespace ("LATCHFORD  HOUSE" -> "Latchford House")."""
    if not name or not name.strip():
        return DEFAULT_LOCATION
    words = re.split(r"\s+", name.strip())
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def resolve_location(description: str | None) -> str:
    """Return the location named in ``description`` or ``"General"``.

    Tries a ``CATEGORY:LOCATION`` hint first, then whatever remains once a
    leading date range and category keyword are stripped.
    """
    if not description or not description.strip():
        return DEFAULT_LOCATION
    text = description.strip()

    colon = COLON_LOCATION_RX.search(text)
    if colon:
        hint = COLUMN_GAP_RX.split(colon.group("location").strip())[0]
        if hint:
            return format_location_name(hint)

    cleaned = DATE_RANGE_PREFIX_RX.sub("", text)
    cleaned = CATEGORY_KEYWORD_PREFIX_RX.sub("", cleaned).strip()
    if len(cleaned) > 2:
        return format_location_name(COLUMN_GAP_RX.split(cleaned)[0])
    return DEFAULT_LOCATION


__all__ = ["format_location_name", "resolve_location"]
