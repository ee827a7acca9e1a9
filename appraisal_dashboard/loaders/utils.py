"""
Shared utilities for workbook ingestion: score normalisation, date
normalisation, text cleaning and rounding.

Every helper here is total: spreadsheet cells are untrusted, so bad values
resolve to None instead of raising.
"""

import logging
import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import pandas as pd

from ..config import EXCEL_EPOCH, MAX_SCORE, MIN_SCORE, RATING_SCORES

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^[+-]?\d+")


def parse_score(val: Any) -> int | None:
    """Convert a raw rating cell to a 0-4 score.

    Text labels ("Always", "Most times", ...) and digit strings are looked
    up in RATING_SCORES. Anything else is read as a leading integer and
    kept only if it falls in 1-4. Returns None for blanks and junk.
    """
    if val is None or isinstance(val, bool):
        return None
    s = str(val).strip()
    if not s:
        return None
    if s in RATING_SCORES:
        return RATING_SCORES[s]

    match = _LEADING_INT.match(s)
    if match is None:
        return None
    num = int(match.group())
    if MIN_SCORE <= num <= MAX_SCORE:
        return num
    return None


def normalise_date(val: Any) -> pd.Timestamp | None:
    """Convert a spreadsheet serial number, datetime or date string to pd.Timestamp.

    Serial numbers use the 1899-12-30 epoch; the fractional part is the time
    of day, rounded to the second. Returns None for unparseable values.
    """
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, pd.Timestamp):
        return None if pd.isna(val) else val
    if isinstance(val, (int, float)):
        if not math.isfinite(val):
            return None
        try:
            ts = pd.Timestamp(EXCEL_EPOCH) + pd.Timedelta(days=float(val))
            return ts.round("s")
        except (ValueError, OverflowError):
            logger.debug("Could not convert serial number %s to date", val)
            return None
    if isinstance(val, str) and not val.strip():
        return None
    try:
        ts = pd.Timestamp(val)
    except (ValueError, TypeError, OverflowError):
        logger.debug("Could not parse date value: %s", val)
        return None
    return None if pd.isna(ts) else ts


def clean_text(val: Any) -> str | None:
    """Return a free-text cell verbatim, or None when it is empty."""
    if val is None:
        return None
    if isinstance(val, str):
        return val if val else None
    if isinstance(val, float) and math.isnan(val):
        return None
    return str(val)


def round_half_up(value: float, ndigits: int = 2) -> float:
    """Round half away from zero (2.345 -> 2.35), not banker's rounding."""
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))
