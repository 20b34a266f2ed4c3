"""GL 505 ledger parsing: format detection, section scanning and row extraction."""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterator, List, NamedTuple, Optional, Tuple

import pdfplumber

from .aggregate import build_payload
from .categorize import categorize
from .constants import (
    ACCOUNT_HEADER_RX,
    ACCT_CODE_RX,
    AMOUNT_TAIL_RX,
    COLUMN_GAP_RX,
    COLUMN_HEADER_RX,
    DATED_MEMO_RX,
    DEFAULT_LOCATION,
    EPISODE_RX,
    FULL_DATE_RX,
    LEDGER_MARKERS,
    NARRATIVE_RX,
    PAY_TYPE_MULTIPLIER_RX,
    PAYROLL_RX,
    RULE_LINE_RX,
    SKIP_PREFIXES,
    SPACED_VENDOR_MAX_TOKENS,
    TRANS_NO_RX,
    VENDOR_RX,
    VENDOR_TOKEN_RX,
)
from .locations import resolve_location
from .models import (
    AccountSection,
    CostEntry,
    DroppedLine,
    LedgerParseResult,
    NotALedgerError,
)
from .utils import normalize_amount, normalize_date

__all__ = [
    "ROW_GRAMMARS",
    "extract_ledger_text",
    "find_vendor",
    "is_ledger_format",
    "parse_ledger_pdf",
    "parse_ledger_text",
    "parse_line",
    "scan_sections",
]

logger = logging.getLogger(__name__)

TAIL_TOKEN_RX = re.compile(r"^(?:-?[\d,]+\.\d{2}|\d{1,2}/\d{1,2}/\d{4}|\d{3,}|[A-Z]{2})$")


class RowFields(NamedTuple):
    """Grammar-specific pieces of a data line."""

    grammar: str
    description: str
    location_hint: Optional[str] = None
    person_name: Optional[str] = None
    pay_type: Optional[str] = None
    work_date: Optional[str] = None
    date_range: Optional[str] = None
    vendor: Optional[str] = None


def is_ledger_format(text: str | None) -> bool:
    """True when ``text`` looks like a GL 505 General Ledger report."""
    if not text or not isinstance(text, str):
        return False
    if any(marker in text for marker in LEDGER_MARKERS):
        return True
    return bool(ACCT_CODE_RX.search(text))


def _is_noise(line: str) -> bool:
    return (
        not line
        or line.startswith(SKIP_PREFIXES)
        or bool(RULE_LINE_RX.match(line))
        or bool(COLUMN_HEADER_RX.search(line))
    )


def scan_sections(text: str) -> Iterator[Tuple[int, str, AccountSection]]:
    """Yield ``(line_number, line, section)`` for every candidate data line.

    The active section is replaced on each ``Acct: CODE - NAME`` header.
    A line is only a candidate once a section is active and its leading
    token repeats that section's account code.
    """
    section: AccountSection | None = None
    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        hdr = ACCOUNT_HEADER_RX.search(line)
        if hdr:
            section = AccountSection(
                code=hdr.group("code"),
                name=hdr.group("name").strip(),
                start_line=line_number,
            )
            continue
        if section is None or _is_noise(line):
            continue
        if line.split(None, 1)[0] != section.code:
            continue
        yield line_number, line, section


# ---------------- Field helpers ---------------- #
def find_vendor(text: str) -> Tuple[Optional[str], Optional[int]]:
    """Return ``(vendor, start offset)`` for the organisation that precedes the
    transaction number, or ``(None, None)``.

    A name ending in a known suffix (INC, LLC, PARTNERS ...) wins. Otherwise,
    when the text still has its column gaps, the column just before the last
    transaction-number column is used if it reads like a name.
    """
    m = VENDOR_RX.search(text)
    if m:
        return m.group("vendor").strip(), m.start("vendor")
    columns = COLUMN_GAP_RX.split(text.strip())
    # Walk left over the trailing date/amount columns to the transaction number.
    for idx in range(len(columns) - 1, 0, -1):
        column = columns[idx]
        if TRANS_NO_RX.match(column):
            candidate = columns[idx - 1]
            if idx > 1 and all(VENDOR_TOKEN_RX.match(tok) for tok in candidate.split()):
                return candidate, None
            break
        if not all(TAIL_TOKEN_RX.match(tok) for tok in column.split()):
            break
    return None, None


def _spaced_vendor(rest: str) -> Tuple[Optional[str], Optional[int]]:
    """Vendor of a single-spaced description remainder.

    The suffix run before the transaction number can swallow description
    words, so only its last SPACED_VENDOR_MAX_TOKENS words are taken. At
    least one word stays behind when nothing else would follow a
    ``CATEGORY:`` hint or start the description.
    """
    m = VENDOR_RX.search(rest)
    if not m:
        return None, None
    tokens = m.group("vendor").split(" ")
    drop = max(len(tokens) - SPACED_VENDOR_MAX_TOKENS, 0)
    before = rest[: m.start("vendor")].rstrip()
    if drop == 0 and len(tokens) > 1 and (not before or before.endswith(":")):
        drop = 1
    start = m.start("vendor")
    if drop:
        start += len(" ".join(tokens[:drop])) + 1
    return " ".join(tokens[drop:]), start


def _row_vendor(rest: str) -> Tuple[Optional[str], Optional[int]]:
    if COLUMN_GAP_RX.search(rest.strip()):
        return find_vendor(rest)
    return _spaced_vendor(rest)


def _leading_column(rest: str, vendor_start: Optional[int] = None) -> str:
    """Text up to the first column gap; on single-spaced lines, up to the
    vendor or else up to the trailing numeric columns."""
    rest = rest.strip()
    parts = COLUMN_GAP_RX.split(rest, maxsplit=1)
    if len(parts) > 1:
        return parts[0]
    if vendor_start is not None:
        return rest[:vendor_start].strip()
    tokens = rest.split()
    while tokens and TAIL_TOKEN_RX.match(tokens[-1]):
        tokens.pop()
    return " ".join(tokens)


def _squash(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


# ---------------- Row grammars ---------------- #
def _parse_payroll(line: str) -> Optional[RowFields]:
    """``MM/DD/YY : LASTNAME, I : PAYTYPE`` rows."""
    m = PAYROLL_RX.search(line)
    if not m:
        return None
    rest = m.group("rest")
    if COLUMN_GAP_RX.search(rest.strip()):
        pay_type = _leading_column(rest)
    else:
        mult = PAY_TYPE_MULTIPLIER_RX.match(rest.strip())
        if mult:
            pay_type = mult.group("pay_type")
        else:
            _vendor, start = find_vendor(rest)
            pay_type = _leading_column(rest, start)
    pay_type = _squash(pay_type) or None
    person = re.sub(r"\s*,\s*", ", ", m.group("person").strip()).upper()
    work_date = m.group("work_date")
    description = f"{work_date} : {person}"
    if pay_type:
        description += f" : {pay_type}"
    return RowFields(
        grammar="payroll",
        description=description,
        person_name=person,
        pay_type=pay_type,
        work_date=work_date,
    )


def _parse_narrative(line: str) -> Optional[RowFields]:
    """``MM/DD-MM/DD CATEGORY:LOCATION`` rows."""
    m = NARRATIVE_RX.search(line)
    if not m:
        return None
    rest = m.group("rest")
    vendor, start = _row_vendor(rest)
    text = _squash(_leading_column(rest, start))
    if not text:
        return None
    return RowFields(
        grammar="narrative",
        description=text,
        location_hint=text,
        date_range=m.group("range"),
        vendor=vendor,
    )


def _parse_dated_memo(line: str) -> Optional[RowFields]:
    """``MM/DD/YY : FREE TEXT`` rows (payroll layout without a person)."""
    m = DATED_MEMO_RX.search(line)
    if not m:
        return None
    rest = m.group("rest")
    vendor, start = _row_vendor(rest)
    text = _squash(_leading_column(rest, start))
    if not text:
        return None
    return RowFields(
        grammar="dated_memo",
        description=text,
        work_date=m.group("work_date"),
        vendor=vendor,
    )


# Order matters: the first grammar that matches wins.
ROW_GRAMMARS: Tuple[Tuple[str, Callable[[str], Optional[RowFields]]], ...] = (
    ("payroll", _parse_payroll),
    ("narrative", _parse_narrative),
    ("dated_memo", _parse_dated_memo),
)


def _classify(line: str) -> Optional[RowFields]:
    for _name, grammar in ROW_GRAMMARS:
        fields = grammar(line)
        if fields is not None:
            return fields
    return None


def _parse_line_checked(
    line: str,
    account_code: str,
    account_name: str,
    line_number: Optional[int] = None,
) -> Tuple[Optional[CostEntry], Optional[str]]:
    """Parse one data line; returns ``(entry, None)`` or ``(None, reason)``."""
    m = AMOUNT_TAIL_RX.search(line.rstrip())
    amount = normalize_amount(m.group("amount")) if m else None
    if amount is None:
        return None, "no_amount"
    if amount == 0:
        return None, "zero_amount"

    ep = EPISODE_RX.search(line)
    episode = ep.group(1) if ep else None

    fields = _classify(line)
    if fields is None:
        fields = RowFields(grammar="fallback", description="")

    date_m = FULL_DATE_RX.search(line)
    date = normalize_date(date_m.group(1)) if date_m else None
    if date is None and fields.work_date:
        date = normalize_date(fields.work_date)

    vendor = fields.vendor or find_vendor(line)[0]
    location = (
        resolve_location(fields.location_hint) if fields.location_hint else DEFAULT_LOCATION
    )

    entry = CostEntry(
        account_code=account_code,
        account_name=account_name,
        episode=episode,
        location=location,
        category=categorize(account_code, fields.description),
        # Placeholder text is for display only and never categorized.
        description=fields.description or f"{account_name} charge",
        amount=amount,
        vendor=vendor,
        person_name=fields.person_name,
        pay_type=fields.pay_type,
        date=date,
        date_range=fields.date_range,
        raw_line=line,
        line_number=line_number,
        grammar=fields.grammar,
    )
    return entry, None


def parse_line(
    line: str,
    account_code: str,
    account_name: str,
    line_number: Optional[int] = None,
) -> Optional[CostEntry]:
    """Parse a single ledger data line into a CostEntry.

    Returns None when the line has no trailing amount or the amount is zero.
    Never raises for malformed text.
    """
    if not line or not isinstance(line, str):
        return None
    entry, _reason = _parse_line_checked(line.strip(), account_code, account_name, line_number)
    return entry


def parse_ledger_text(text: str) -> LedgerParseResult:
    """Run the full pipeline over the extracted text of one ledger report.

    Raises NotALedgerError when the text is not a recognized ledger; row
    extraction is not attempted in that case.
    """
    if not is_ledger_format(text):
        raise NotALedgerError("Not a valid production ledger format")

    entries: List[CostEntry] = []
    dropped: List[DroppedLine] = []
    for line_number, line, section in scan_sections(text):
        entry, reason = _parse_line_checked(line, section.code, section.name, line_number)
        if entry is not None:
            entries.append(entry)
            continue
        logger.debug("Dropped line %d (%s): %s", line_number, reason, line)
        dropped.append(
            DroppedLine(
                line_number=line_number,
                account_code=section.code,
                reason=reason or "unparsed",
                raw_line=line,
            )
        )

    result = build_payload(entries, dropped)
    logger.info(
        "Parsed ledger: %d entries, %d groups, %d dropped, total %s",
        result.entries_found,
        len(result.grouped),
        len(dropped),
        result.total_amount,
    )
    return result


# ---------------- PDF boundary ---------------- #
def extract_ledger_text(pdf_file) -> str:
    """Extract page text from a PDF with horizontal spacing preserved.

    ``layout=True`` keeps the multi-space column gaps the row grammars rely
    on. Returns an empty string when the PDF cannot be read.
    """
    pages: List[str] = []
    try:
        with pdfplumber.open(pdf_file) as pdf:
            for page in pdf.pages:
                pages.append(page.extract_text(layout=True) or "")
    except Exception:
        logger.warning("Could not extract text from PDF", exc_info=True)
        return ""
    return "\n".join(pages)


def parse_ledger_pdf(pdf_file) -> LedgerParseResult:
    return parse_ledger_text(extract_ledger_text(pdf_file))
