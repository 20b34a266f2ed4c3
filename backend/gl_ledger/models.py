"""Record types produced by the ledger parser."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

from .constants import DEFAULT_LOCATION, UNKNOWN_EPISODE
from .utils import records_to_json, to_cents_float


class Category(str, Enum):
    SECURITY = "Security"
    POLICE = "Police"
    FIRE = "Fire"
    RENTALS = "Rentals"
    PERMITS = "Permits"
    LOC_FEES = "LocFees"


class NotALedgerError(ValueError):
    """Raised when a text blob is not a recognized GL 505 ledger report."""

    error_code = "NOT_A_LEDGER"


class AccountSection(NamedTuple):
    code: str
    name: str
    start_line: int


class CostEntry(NamedTuple):
    """One ledger line item.

    ``account_code``/``account_name`` come from the active section header,
    never from the line itself. ``amount`` is never zero.
    """

    account_code: str
    account_name: str
    episode: Optional[str]
    location: str
    category: Category
    description: str
    amount: Decimal
    vendor: Optional[str] = None
    person_name: Optional[str] = None
    pay_type: Optional[str] = None
    date: Optional[str] = None
    date_range: Optional[str] = None
    raw_line: str = ""
    line_number: Optional[int] = None
    grammar: str = "fallback"

    def to_dict(self) -> dict:
        return records_to_json([self._asdict()])[0]


class DroppedLine(NamedTuple):
    line_number: int
    account_code: str
    reason: str
    raw_line: str

    def to_dict(self) -> dict:
        return self._asdict()


class GroupedResult:
    """Entries sharing an (episode, location) key plus per-category subtotals."""

    __slots__ = ("episode", "location", "entries", "totals")

    def __init__(
        self,
        episode: Optional[str],
        location: str,
        entries: List[CostEntry],
        totals: Dict[Category, Decimal],
    ):
        self.episode = episode
        self.location = location
        self.entries = entries
        self.totals = totals

    @property
    def key(self) -> str:
        return f"{self.episode or UNKNOWN_EPISODE}_{self.location or DEFAULT_LOCATION}"

    @property
    def grand_total(self) -> Decimal:
        return sum(self.totals.values(), Decimal("0"))

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "episode": self.episode,
            "location": self.location,
            "entries": [e.to_dict() for e in self.entries],
            "totals": {c.value: to_cents_float(v) for c, v in self.totals.items()},
            "grandTotal": to_cents_float(self.grand_total),
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return (
            f"GroupedResult(key={self.key!r}, entries={len(self.entries)}, "
            f"grand_total={self.grand_total})"
        )


class LedgerParseResult(NamedTuple):
    entries: List[CostEntry]
    grouped: List[GroupedResult]
    dropped: List[DroppedLine]
    total_amount: Decimal

    @property
    def entries_found(self) -> int:
        return len(self.entries)

    def to_dict(self) -> dict:
        return {
            "entries": [e.to_dict() for e in self.entries],
            "grouped": [g.to_dict() for g in self.grouped],
            "entriesFound": self.entries_found,
            "totalAmount": to_cents_float(self.total_amount),
            "droppedLines": [d.to_dict() for d in self.dropped],
        }


__all__ = [
    "AccountSection",
    "Category",
    "CostEntry",
    "DroppedLine",
    "GroupedResult",
    "LedgerParseResult",
    "NotALedgerError",
]
