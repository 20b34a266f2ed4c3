"""Account-code categorization for GL 505 location ledgers.

Every ledger line lands in exactly one of six spend categories:
  1. Security   (account 6304)
  2. Police     (account 6305)
  3. Fire       (account 6307)
  4. Rentals    (tents, tables, restrooms, generators ...)
  5. Permits    (filming permits, licenses, FilmLA)
  6. LocFees    (layout, maps, scouting; also any unmapped account)

Most accounts map directly. The catch-all "Fees & Permits" account (6342)
mixes three true categories, so its rows get a second keyword pass over the
description. Keyword sets are checked in a fixed order, Permits before
Rentals before LocFees, because a permit line can also mention a rental item.
A catch-all row that matches nothing is a Rental.

Extensibility:
  * Environment variable LEDGER_RULES_FILE (JSON) can supply overrides:
        {
          "account_map": {"6310": "Security"},
          "catch_all_code": "6342",
          "keywords": {"Permits": ["permit", "street use"]}
        }
    Listed keyword sets replace (not merge) the defaults for that category.
    The check order never changes.
  * `reload_rules()` drops the cached rule set so an edited file is re-read.
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from typing import Dict, NamedTuple, Tuple

from .constants import (
    CATCH_ALL_ACCOUNT_CODE,
    CATCH_ALL_DEFAULT,
    DEFAULT_ACCOUNT_MAP,
    DEFAULT_SUBCATEGORY_KEYWORDS,
    UNKNOWN_ACCOUNT_DEFAULT,
)
from .models import Category

logger = logging.getLogger(__name__)

CANONICAL_CATEGORIES = [c.value for c in Category]


class KeywordRule(NamedTuple):
    category: Category
    keywords: Tuple[str, ...]


class RuleSet(NamedTuple):
    account_map: Dict[str, Category]
    catch_all_code: str
    keyword_rules: Tuple[KeywordRule, ...]


def _load_overrides_from_file() -> dict:
    path = os.environ.get("LEDGER_RULES_FILE")
    if not path:
        return {}
    if not os.path.isfile(path):
        logger.warning("LEDGER_RULES_FILE %s does not exist; using defaults", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable LEDGER_RULES_FILE %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring LEDGER_RULES_FILE %s: expected a JSON object", path)
        return {}
    return data


def _coerce_category(value) -> Category | None:
    try:
        return Category(value)
    except ValueError:
        return None


@lru_cache(maxsize=1)
def _compile_rules() -> RuleSet:
    overrides = _load_overrides_from_file()

    account_map = {code: Category(cat) for code, cat in DEFAULT_ACCOUNT_MAP.items()}
    for code, cat in (overrides.get("account_map") or {}).items():
        category = _coerce_category(cat)
        if category is None or not str(code).isdigit():
            logger.warning("Skipping account override %r -> %r", code, cat)
            continue
        account_map[str(code)] = category

    catch_all = str(overrides.get("catch_all_code") or CATCH_ALL_ACCOUNT_CODE)

    keyword_overrides = overrides.get("keywords") or {}
    rules = []
    for cat, default_keywords in DEFAULT_SUBCATEGORY_KEYWORDS:
        keywords = keyword_overrides.get(cat, default_keywords)
        if not isinstance(keywords, (list, tuple)):
            logger.warning("Skipping keyword override for %s: expected a list", cat)
            keywords = default_keywords
        cleaned = tuple(str(k).lower() for k in keywords if isinstance(k, str) and k)
        rules.append(KeywordRule(Category(cat), cleaned))
    return RuleSet(account_map, catch_all, tuple(rules))


def reload_rules() -> int:
    """Clear the cached rule set and rebuild it.

    Returns the number of mapped account codes after reload.
    """
    _compile_rules.cache_clear()
    return len(_compile_rules().account_map)


def subcategorize_catch_all(description: str | None) -> Category:
    """Pick Permits / Rentals / LocFees for a catch-all row by keyword."""
    lower_desc = (description or "").lower()
    for rule in _compile_rules().keyword_rules:
        if any(kw in lower_desc for kw in rule.keywords):
            return rule.category
    return Category(CATCH_ALL_DEFAULT)


def categorize(account_code: str, description: str | None) -> Category:
    rules = _compile_rules()
    if account_code == rules.catch_all_code:
        return subcategorize_catch_all(description)
    mapped = rules.account_map.get(account_code)
    if mapped is not None:
        return mapped
    return Category(UNKNOWN_ACCOUNT_DEFAULT)


__all__ = [
    "CANONICAL_CATEGORIES",
    "KeywordRule",
    "categorize",
    "reload_rules",
    "subcategorize_catch_all",
]
