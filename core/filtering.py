"""
Deduplication and grouping of extracted transactions.
"""
from typing import AbstractSet, Dict, Iterable, List

from core.logger import setup_logger
from core.schema import FilterResult, Row, Transaction

logger = setup_logger(__name__)


def filter_transactions(
    transactions: Iterable[Transaction],
    exclusion_keys: AbstractSet[str],
) -> FilterResult:
    """
    Drop already-imported transactions and group the rest by payment method.

    Each split sibling of a combined payment is tested on its own key, so one
    half can be dropped while the other survives.

    Args:
        transactions: Transactions in source order
        exclusion_keys: Keys already present in MoneyForward ME

    Returns:
        FilterResult with rows grouped by payment method and the duplicate count
    """
    grouped: Dict[str, List[Row]] = {}
    duplicates = 0

    for transaction in transactions:
        if transaction.key in exclusion_keys:
            duplicates += 1
            logger.debug(f"Duplicate transaction: {transaction.key}")
            continue
        grouped.setdefault(transaction.payment_method, []).append(dict(transaction.row))

    logger.info(
        f"Kept {sum(len(rows) for rows in grouped.values())} transactions "
        f"in {len(grouped)} payment methods, dropped {duplicates} duplicates"
    )

    return FilterResult(grouped=grouped, duplicates=duplicates)
