"""
Shared utilities for data ingestion: date normalisation, header matching,
quantity coercion.
"""

import logging
import re
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

# M/D/YYYY or MM-DD-YYYY anywhere in the text
_US_DATE_PATTERN = re.compile(r"(\d{1,2})[/-](\d{1,2})[/-](\d{4})")

# M/D/YY or MM-DD-YY, not part of a longer number
_SHORT_US_DATE_PATTERN = re.compile(r"(?<!\d)(\d{1,2})[/-](\d{1,2})[/-](\d{2})(?!\d)")

# Two-digit years below the pivot are 20xx, the rest 19xx
_CENTURY_PIVOT = 50

_LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")

# Text without an explicit year would be completed from the wall clock
# ("now", "March 5"), so it is never treated as a date.
_YEAR_PATTERN = re.compile(r"\d{4}")


def parse_date(val: Any) -> pd.Timestamp | None:
    """Convert a loosely formatted date string to a midnight pd.Timestamp.

    Generic parsing is tried first (ISO ``YYYY-MM-DD`` and anything else
    pandas recognises); the result is reduced to its calendar day so time of
    day and timezone offsets drop out. Failing that, a ``M/D/YYYY`` or
    ``M-D-YYYY`` fragment is read month-first.

    Text without a four-digit year is only accepted as a ``M/D/YY`` or
    ``M-D-YY`` fragment, with a fixed pivot: 00-49 -> 2000s, 50-99 -> 1900s.
    Non-strings, blank strings, other year-less text and unparseable text
    all return None; nothing is raised.
    """
    if not isinstance(val, str):
        return None
    text = val.strip()
    if not text:
        return None
    if not _YEAR_PATTERN.search(text):
        return _parse_short_us_date(text)

    try:
        parsed = pd.Timestamp(text)
    except (ValueError, TypeError, OverflowError):
        parsed = None
    if parsed is not None and not pd.isna(parsed):
        try:
            return pd.Timestamp(year=parsed.year, month=parsed.month, day=parsed.day)
        except (ValueError, OverflowError):
            pass

    match = _US_DATE_PATTERN.search(text)
    if match:
        month, day, year = (int(part) for part in match.groups())
        return _build_date(year, month, day, match.group(0))

    return None


def _parse_short_us_date(text: str) -> pd.Timestamp | None:
    match = _SHORT_US_DATE_PATTERN.search(text)
    if not match:
        return None
    month, day, year = (int(part) for part in match.groups())
    year += 2000 if year < _CENTURY_PIVOT else 1900
    return _build_date(year, month, day, match.group(0))


def _build_date(year: int, month: int, day: int, fragment: str) -> pd.Timestamp | None:
    try:
        return pd.Timestamp(year=year, month=month, day=day)
    except (ValueError, OverflowError):
        logger.debug("Rejected out-of-range date fragment %r", fragment)
        return None


def normalise_header(name: Any) -> str:
    """Reduce a column name to a comparison key.

    Lower-cases and drops whitespace and underscores, so "Product Name",
    "product_name" and "PRODUCTNAME" all compare equal.
    """
    return re.sub(r"[\s_]", "", str(name).lower())


def safe_int(val: Any) -> int:
    """Coerce a quantity cell to int, returning 0 for non-numeric values.

    Reads the leading integer of a string ("12 units" -> 12, "7.9" -> 7).
    Native numbers are truncated toward zero.
    """
    if val is None:
        return 0
    if isinstance(val, bool):
        return int(val)
    if isinstance(val, (int, float)):
        if pd.isna(val) or val in (float("inf"), float("-inf")):
            return 0
        return int(val)
    match = _LEADING_INT_PATTERN.match(str(val))
    if not match:
        return 0
    return int(match.group(1))
