"""Small shared helpers used by backend modules."""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, List

CENTS = Decimal("0.01")


def normalize_amount(raw: str | None) -> Decimal | None:
    """Parse a ledger amount token (``-1,234.56``) into a Decimal.

    Returns None for anything that is not a signed, comma-grouped number with
    exactly two fractional digits.
    """
    if not raw:
        return None
    token = raw.strip()
    if not re.fullmatch(r"-?[\d,]+\.\d{2}", token):
        return None
    core = token.replace(",", "")
    if not re.fullmatch(r"-?\d+\.\d{2}", core):
        return None
    try:
        return Decimal(core)
    except InvalidOperation:
        return None


def normalize_date(raw: str | None) -> str | None:
    """Normalize ``MM/DD/YYYY`` (or ``MM/DD/YY``, ``-`` separated) to ISO.

    Two digit years are read as 20YY. Returns None when the token does not
    split into three parts or is not a real calendar date.
    """
    if not raw:
        return None
    parts = re.split(r"[/-]", raw.strip())
    if len(parts) != 3:
        return None
    month, day, year = parts
    if len(year) == 2:
        year = "20" + year
    try:
        return date(int(year), int(month), int(day)).isoformat()
    except ValueError:
        return None


def to_cents_float(value: Decimal | None) -> float | None:
    """Round a Decimal to cents and hand it out as a JSON-friendly float."""
    if value is None:
        return None
    return float(value.quantize(CENTS))


def records_to_json(records: List[dict]) -> List[dict]:
    """Convert record dicts to JSON-serializable values.

    - Decimals become floats rounded to cents
    - date/datetime objects become ISO strings
    - Enum members become their value
    """
    out: List[dict] = []
    for rec in records:
        clean: dict[str, Any] = {}
        for k, v in rec.items():
            if isinstance(v, Decimal):
                clean[k] = to_cents_float(v)
            elif hasattr(v, "isoformat"):
                clean[k] = v.isoformat()
            elif hasattr(v, "value") and isinstance(getattr(v, "value"), str):
                clean[k] = v.value
            else:
                clean[k] = v
        out.append(clean)
    return out


__all__ = ["normalize_amount", "normalize_date", "to_cents_float", "records_to_json"]
