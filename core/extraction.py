"""
Transaction extraction from the PayPay export.
Splits combined payments into one transaction per payment method and
derives the dedup key for each.
"""
import re
from typing import List, Optional, Tuple

from core.logger import setup_logger
from core.normalize import accumulate_stats, clean_amount
from core.parsing import (
    SOURCE_COLUMNS,
    SOURCE_COUNTERPARTY_COLUMN,
    SOURCE_DATE_COLUMN,
    SOURCE_EXPENSE_COLUMN,
    SOURCE_INCOME_COLUMN,
    SOURCE_METHOD_COLUMN,
    check_columns,
    parse_csv_text,
)
from core.schema import ExtractionResult, Row, Stats, Transaction

logger = setup_logger(__name__)

# "<name> (<amount>円)" entries, amount may carry thousands separators
COMBINED_PAYMENT_PATTERN = re.compile(r"([^,]+?)\s*\(([\d,]+)円\)")


def split_payment_methods(field: Optional[str]) -> List[Tuple[str, str]]:
    """
    Split a combined payment method field into (name, amount) entries.

    Example:
        "PayPayポイント (93円), PayPay残高 (2,599円)"
        -> [("PayPayポイント", "93"), ("PayPay残高", "2599")]

    Args:
        field: Raw value of the payment method column

    Returns:
        List of entries, empty if the field is a single plain method name
    """
    if not field:
        return []

    entries = []
    for match in COMBINED_PAYMENT_PATTERN.finditer(field):
        name = match.group(1).strip()
        amount = match.group(2).replace(",", "")
        if name and amount:
            entries.append((name, amount))
    return entries


def detect_direction(row: Row) -> Optional[Tuple[str, str]]:
    """
    Work out which amount column carries the row's value.

    Args:
        row: Source row

    Returns:
        Tuple of (amount column, cleaned amount), or None if neither column is usable
    """
    expense = clean_amount(row.get(SOURCE_EXPENSE_COLUMN))
    if expense is not None:
        return SOURCE_EXPENSE_COLUMN, expense

    income = clean_amount(row.get(SOURCE_INCOME_COLUMN))
    if income is not None:
        return SOURCE_INCOME_COLUMN, income

    return None


def build_transaction_key(row: Row, amount_column: str, amount: str, method: str) -> str:
    """
    Build the dedup key for one transaction.

    Format: {date}_{signed amount}_{payment method}_{counterparty}, matching the
    key built from MoneyForward ME rows.
    """
    timestamp = row.get(SOURCE_DATE_COLUMN) or ""
    date_part = timestamp.strip().split(" ")[0]
    signed_amount = f"-{amount}" if amount_column == SOURCE_EXPENSE_COLUMN else amount
    counterparty = row.get(SOURCE_COUNTERPARTY_COLUMN) or ""
    return f"{date_part}_{signed_amount}_{method}_{counterparty}"


def row_to_transactions(row: Row) -> List[Transaction]:
    """
    Turn one source row into its transactions.

    A combined payment yields one transaction per matched entry, each with the
    method and amount columns overwritten. A plain row yields one transaction.
    Rows without a payment method or a usable amount yield none.

    Args:
        row: Source row

    Returns:
        Transactions in encounter order
    """
    method_field = row.get(SOURCE_METHOD_COLUMN)
    if method_field is None or not method_field.strip():
        logger.debug("Skipping row without payment method")
        return []

    entries = split_payment_methods(method_field)
    direction = detect_direction(row)

    if entries:
        # Entries carry their own amounts; combined payments are outgoing
        amount_column = direction[0] if direction else SOURCE_EXPENSE_COLUMN
    elif direction is None:
        logger.debug(f"Skipping row without usable amount (method={method_field})")
        return []
    else:
        amount_column, row_amount = direction
        entries = [(method_field, row_amount)]

    transactions = []
    for name, amount in entries:
        new_row = dict(row)
        new_row[SOURCE_METHOD_COLUMN] = name
        new_row[amount_column] = amount
        transactions.append(
            Transaction(
                key=build_transaction_key(row, amount_column, amount, name),
                row=new_row,
                payment_method=name,
            )
        )
    return transactions


def extract_transactions(csv_text: str) -> ExtractionResult:
    """
    Extract transactions from a PayPay transaction history export.

    Stats cover the original rows, before combined payments are split.

    Args:
        csv_text: Decoded CSV text of the export

    Returns:
        ExtractionResult with transactions, stats, and the header list
    """
    headers, rows = parse_csv_text(csv_text)
    if not rows:
        logger.info("PayPay export contains no rows")
        return ExtractionResult()

    check_columns(headers, SOURCE_COLUMNS, "PayPay export")

    stats = Stats()
    transactions: List[Transaction] = []
    for row in rows:
        stats = accumulate_stats(stats, row.get(SOURCE_DATE_COLUMN))
        transactions.extend(row_to_transactions(row))

    logger.info(
        f"Extracted {len(transactions)} transactions from {stats.count} PayPay rows"
    )

    return ExtractionResult(
        transactions=transactions,
        stats=stats,
        headers=headers,
    )
