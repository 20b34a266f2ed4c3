"""Compiled patterns and lookup tables for GL 505 ledger reports."""

import re

# ---------------- Format detection ---------------- #
LEDGER_MARKERS = ("General Ledger", "GL 505")
ACCT_CODE_RX = re.compile(r"Acct:\s*\d{4}")

# ---------------- Section scanning ---------------- #
ACCOUNT_HEADER_RX = re.compile(r"Acct:\s*(?P<code>\d{4})\s*-\s*(?P<name>.+)")
SKIP_PREFIXES = ("Account", "GL 505")
RULE_LINE_RX = re.compile(r"^[-=\s]+$")
COLUMN_HEADER_RX = re.compile(r"\bVendor\b.*\bTrans#", re.IGNORECASE)

# ---------------- Field extraction ---------------- #
AMOUNT_TAIL_RX = re.compile(r"(?P<amount>-?[\d,]+\.\d{2})$")
# A whole number token; digits inside amounts, dates or longer numbers never count.
EPISODE_RX = re.compile(r"(?<![\w,./])(10[1-9]|1[1-9]\d)(?![\w,./])")
FULL_DATE_RX = re.compile(r"\b(\d{1,2}/\d{1,2}/\d{4})\b")
COLUMN_GAP_RX = re.compile(r"\s{2,}")
TRANS_NO_RX = re.compile(r"^\d{3,}$")

# "10/25/25 : ALBIN, W : REGULAR 1X"
PAYROLL_RX = re.compile(
    r"(?P<work_date>\d{2}/\d{2}/\d{2})\s*:\s*"
    r"(?P<person>[A-Z][A-Z'\-]*,\s*[A-Z]+)\s*:\s*"
    r"(?P<rest>.+)$",
    re.IGNORECASE,
)
PAY_TYPE_MULTIPLIER_RX = re.compile(r"^(?P<pay_type>.*?\b\d+(?:\.\d+)?X)\b", re.IGNORECASE)

# "01/15-01/16 SECURITY:LATCHFORD HOUSE"
NARRATIVE_RX = re.compile(
    r"(?P<range>\d{2}/\d{2}(?:/\d{2})?-\d{2}/\d{2}(?:/\d{2})?)\s+(?P<rest>[A-Z].*)$",
    re.IGNORECASE,
)

# "10/25/25 : FIRE WATCH SERVICES"
DATED_MEMO_RX = re.compile(
    r"(?P<work_date>\d{2}/\d{2}/\d{2})\s*:\s*(?P<rest>[A-Z][^:]*)$",
    re.IGNORECASE,
)

VENDOR_SUFFIXES = (
    "INC",
    "LLC",
    "LTD",
    "CO",
    "CORP",
    "COMPANY",
    "PARTNERS",
    "SERVICES",
    "SERVICE",
    "SECURITY",
    "RENTALS",
    "RENTAL",
    "STUDIOS",
    "STUDIO",
    "PRODUCTIONS",
    "PRODUCTION",
    "ENTERTAINMENT",
    "WATCH",
    "GROUP",
)
# Vendor tokens are letters only (plus & . ' -); the suffix is the last token
# and a transaction number must follow.
VENDOR_RX = re.compile(
    r"\b(?P<vendor>(?:[A-Z][A-Z&.'\-]* )*?(?:"
    + "|".join(VENDOR_SUFFIXES)
    + r")\.?)\s+(?P<trans>\d{3,})\b"
)
VENDOR_TOKEN_RX = re.compile(r"^[A-Z][A-Z&.'\-]*$")
# Single-spaced rows give no column boundary between description and vendor.
SPACED_VENDOR_MAX_TOKENS = 3

# ---------------- Location resolution ---------------- #
DATE_RANGE_PREFIX_RX = re.compile(r"^\d{2}/\d{2}[-/]\d{2}/?\d{0,2}\s*")
CATEGORY_KEYWORD_PREFIX_RX = re.compile(
    r"^(SECURITY|FIRE|POLICE|PERMITS?|LAYOUT|RESTROOM|TENTS?|DRIVING)(?:[\s:]+|$)",
    re.IGNORECASE,
)
COLON_LOCATION_RX = re.compile(r"[A-Z]+:\s*(?P<location>[A-Z][A-Z0-9'&.\- ]*)")
DEFAULT_LOCATION = "General"
UNKNOWN_EPISODE = "unknown"

# ---------------- Categorization ---------------- #
DEFAULT_ACCOUNT_MAP = {
    "6304": "Security",
    "6305": "Police",
    "6307": "Fire",
}
CATCH_ALL_ACCOUNT_CODE = "6342"
CATCH_ALL_DEFAULT = "Rentals"
UNKNOWN_ACCOUNT_DEFAULT = "LocFees"

# Check order is significant: Permits, then Rentals, then LocFees.
DEFAULT_SUBCATEGORY_KEYWORDS = (
    ("Permits", ("permit", "permits", "license", "film la", "filming permit")),
    (
        "Rentals",
        (
            "tent",
            "tents",
            "table",
            "tables",
            "chair",
            "chairs",
            "restroom",
            "hvac",
            "dumpster",
            "air scrubber",
            "generator",
            "heater",
        ),
    ),
    ("LocFees", ("layout", "maps", "survey", "scout")),
)
