"""
Value normalization shared by both export formats.
Handles date parsing, date range bookkeeping, and amount cleaning.
"""
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Tuple

import pandas as pd

from core.logger import setup_logger
from core.schema import Stats

logger = setup_logger(__name__)

# Both exports are written in Japan Standard Time
JST = timezone(timedelta(hours=9), name="JST")

PLACEHOLDER = "-"

_DATETIME_PATTERN = re.compile(r"^\d{4}/\d{1,2}/\d{1,2} \d{1,2}:\d{2}:\d{2}$")
_DATE_PATTERN = re.compile(r"^\d{4}/\d{1,2}/\d{1,2}$")
_AMOUNT_PATTERN = re.compile(r"^\d+(\.\d+)?$")

DateRange = Tuple[Optional[datetime], Optional[datetime]]


def parse_date(raw: Optional[str]) -> Optional[datetime]:
    """
    Parse an export date string as a JST instant.

    Accepts "YYYY/MM/DD HH:mm:ss" (PayPay) and "YYYY/MM/DD" (MoneyForward ME,
    read as midnight). Anything else yields None.

    Args:
        raw: Raw date value from a row

    Returns:
        Timezone-aware datetime or None
    """
    if raw is None or pd.isna(raw):
        return None

    value = str(raw).strip()
    if _DATETIME_PATTERN.match(value):
        fmt = "%Y/%m/%d %H:%M:%S"
    elif _DATE_PATTERN.match(value):
        fmt = "%Y/%m/%d"
    else:
        logger.debug(f"Unrecognized date shape: '{value}'")
        return None

    try:
        return datetime.strptime(value, fmt).replace(tzinfo=JST)
    except ValueError as e:
        logger.debug(f"Invalid calendar date '{value}': {e}")
        return None


def update_date_range(
    date: Optional[datetime],
    min_date: Optional[datetime],
    max_date: Optional[datetime],
) -> DateRange:
    """
    Widen a date range to include a date.

    Ties keep the existing bound. A None date leaves the range as it is.

    Args:
        date: Date to include
        min_date: Current lower bound
        max_date: Current upper bound

    Returns:
        Tuple of (min_date, max_date)
    """
    if date is None:
        return min_date, max_date
    if min_date is None or date < min_date:
        min_date = date
    if max_date is None or date > max_date:
        max_date = date
    return min_date, max_date


def accumulate_stats(stats: Stats, raw_date: Optional[str]) -> Stats:
    """Count one more row and widen the range with its date."""
    start_date, end_date = update_date_range(
        parse_date(raw_date), stats.start_date, stats.end_date
    )
    return Stats(count=stats.count + 1, start_date=start_date, end_date=end_date)


def is_placeholder(value: Any) -> bool:
    """True for missing, blank, or "-" values."""
    if value is None or pd.isna(value):
        return True
    text = str(value).strip()
    return text == "" or text == PLACEHOLDER


def clean_amount(value: Any) -> Optional[str]:
    """
    Clean a yen amount for use in dedup keys and output rows.
    Removes thousands separators and surrounding whitespace.

    Args:
        value: Raw amount value

    Returns:
        Digits-only amount string, or None if the value is not a usable amount
    """
    if is_placeholder(value):
        return None

    amount_str = str(value).strip().replace(",", "").replace(" ", "").replace("\xa0", "")
    if not _AMOUNT_PATTERN.match(amount_str):
        logger.debug(f"Unusable amount: '{value}'")
        return None
    return amount_str


def clean_signed_amount(value: Any) -> Optional[str]:
    """
    Clean an amount the aggregator has already signed.

    Args:
        value: Raw amount value, e.g. "-1,200"

    Returns:
        Amount string with its sign kept, or None if unusable
    """
    if is_placeholder(value):
        return None

    text = str(value).strip()
    sign = ""
    if text[0] in "+-":
        sign = "-" if text[0] == "-" else ""
        text = text[1:]

    amount = clean_amount(text)
    if amount is None:
        return None
    return f"{sign}{amount}"
