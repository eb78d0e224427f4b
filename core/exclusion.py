"""
Exclusion key set built from MoneyForward ME exports.
Transactions already recorded there are dropped from the conversion.
"""
from typing import Iterable, Optional, Set

from core.logger import setup_logger
from core.normalize import accumulate_stats, clean_signed_amount
from core.parsing import (
    AGGREGATOR_AMOUNT_COLUMN,
    AGGREGATOR_COLUMNS,
    AGGREGATOR_CONTENT_COLUMN,
    AGGREGATOR_DATE_COLUMN,
    AGGREGATOR_INCLUDED_COLUMN,
    AGGREGATOR_INSTITUTION_COLUMN,
    check_columns,
    parse_csv_text,
)
from core.schema import ExclusionResult, Row, Stats

logger = setup_logger(__name__)

# 計算対象 value for rows the aggregator leaves out of its totals
NOT_COUNTED = "0"


def build_exclusion_key(row: Row) -> Optional[str]:
    """
    Build the dedup key for one MoneyForward ME row.

    Format: {date}_{signed amount}_{institution}_{content}, mirroring the key
    derived from PayPay transactions.

    Args:
        row: Aggregator row

    Returns:
        Key string, or None if the row lacks a date or a usable amount
    """
    date = row.get(AGGREGATOR_DATE_COLUMN)
    amount = clean_signed_amount(row.get(AGGREGATOR_AMOUNT_COLUMN))
    if not date or amount is None:
        return None

    institution = row.get(AGGREGATOR_INSTITUTION_COLUMN) or ""
    content = row.get(AGGREGATOR_CONTENT_COLUMN) or ""
    return f"{date.strip()}_{amount}_{institution}_{content}"


def build_exclusion_set(csv_texts: Iterable[str]) -> ExclusionResult:
    """
    Collect dedup keys from one or more MoneyForward ME exports.

    Every row counts toward the stats, including rows flagged as not counted
    and rows that produce no key.

    Args:
        csv_texts: Decoded CSV texts of the exports

    Returns:
        ExclusionResult with the key set and stats
    """
    keys: Set[str] = set()
    stats = Stats()
    skipped = 0

    for index, text in enumerate(csv_texts):
        headers, rows = parse_csv_text(text)
        if rows:
            check_columns(headers, AGGREGATOR_COLUMNS, f"MoneyForward ME export #{index + 1}")

        for row in rows:
            stats = accumulate_stats(stats, row.get(AGGREGATOR_DATE_COLUMN))

            if row.get(AGGREGATOR_INCLUDED_COLUMN) == NOT_COUNTED:
                skipped += 1
                continue

            key = build_exclusion_key(row)
            if key is None:
                skipped += 1
                continue
            keys.add(key)

    logger.info(
        f"Built {len(keys)} exclusion keys from {stats.count} MoneyForward ME rows "
        f"({skipped} rows without a key)"
    )

    return ExclusionResult(keys=frozenset(keys), stats=stats)
