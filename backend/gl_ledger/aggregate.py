"""Episode/location roll-ups of parsed cost entries."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

import pandas as pd

from .constants import DEFAULT_LOCATION, UNKNOWN_EPISODE
from .models import (
    Category,
    CostEntry,
    DroppedLine,
    GroupedResult,
    LedgerParseResult,
)

ZERO = Decimal("0")


def group_key(entry: CostEntry) -> str:
    return f"{entry.episode or UNKNOWN_EPISODE}_{entry.location or DEFAULT_LOCATION}"


def aggregate(entries: Iterable[CostEntry]) -> List[GroupedResult]:
    """Fold entries into one GroupedResult per (episode, location).

    Groups come out in first-seen order; entries keep input order within
    their group. Subtotals are exact Decimal sums.
    """
    grouped: Dict[str, GroupedResult] = {}
    for entry in entries:
        key = group_key(entry)
        group = grouped.get(key)
        if group is None:
            group = GroupedResult(
                episode=entry.episode,
                location=entry.location or DEFAULT_LOCATION,
                entries=[],
                totals={},
            )
            grouped[key] = group
        group.entries.append(entry)
        group.totals[entry.category] = group.totals.get(entry.category, ZERO) + entry.amount
    return list(grouped.values())


def total_amount(entries: Iterable[CostEntry]) -> Decimal:
    return sum((e.amount for e in entries), ZERO)


def build_payload(
    entries: Sequence[CostEntry], dropped: Sequence[DroppedLine] = ()
) -> LedgerParseResult:
    """Assemble the final result once the scan is complete."""
    entries = list(entries)
    return LedgerParseResult(
        entries=entries,
        grouped=aggregate(entries),
        dropped=list(dropped),
        total_amount=total_amount(entries),
    )


# ---------------- Tabular views ---------------- #
FRAME_COLUMNS = [
    "line_number",
    "account_code",
    "account_name",
    "episode",
    "location",
    "category",
    "description",
    "vendor",
    "person_name",
    "pay_type",
    "date",
    "date_range",
    "amount",
]


def entries_to_frame(entries: Sequence[CostEntry]) -> pd.DataFrame:
    """One row per entry; ``amount`` as float, ``category`` as categorical."""
    if not entries:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    rows = []
    for e in entries:
        rec = e._asdict()
        rec["category"] = e.category.value
        rec["amount"] = float(e.amount)
        rows.append({k: rec.get(k) for k in FRAME_COLUMNS})
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["category"] = pd.Categorical(
        df["category"], categories=[c.value for c in Category]
    )
    return df


def category_summary(entries: Sequence[CostEntry]) -> pd.DataFrame:
    """Pivot of (episode, location) rows by category columns, plus a Total column.

    Cells are rounded to cents. Categories with no spend are omitted.
    """
    df = entries_to_frame(entries)
    if df.empty:
        return pd.DataFrame()
    df["episode"] = df["episode"].fillna(UNKNOWN_EPISODE)
    pivot = df.pivot_table(
        index=["episode", "location"],
        columns="category",
        values="amount",
        aggfunc="sum",
        fill_value=0.0,
        observed=True,
    )
    pivot.columns = [str(c) for c in pivot.columns]
    pivot["Total"] = pivot.sum(axis=1)
    return pivot.round(2)


__all__ = [
    "aggregate",
    "build_payload",
    "category_summary",
    "entries_to_frame",
    "group_key",
    "total_amount",
]
