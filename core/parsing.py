"""
CSV parsing with Japanese header support.
Handles both the PayPay transaction export and the MoneyForward ME export.
"""
import io
from typing import Iterable, List, Tuple

import pandas as pd

from core.exceptions import ParsingError
from core.logger import setup_logger
from core.schema import Row

logger = setup_logger(__name__)

# PayPay transaction history columns
SOURCE_DATE_COLUMN = "取引日"
SOURCE_EXPENSE_COLUMN = "出金金額（円）"
SOURCE_INCOME_COLUMN = "入金金額（円）"
SOURCE_COUNTERPARTY_COLUMN = "取引先"
SOURCE_METHOD_COLUMN = "取引方法"
SOURCE_ID_COLUMN = "取引番号"

SOURCE_COLUMNS: Tuple[str, ...] = (
    SOURCE_DATE_COLUMN,
    SOURCE_EXPENSE_COLUMN,
    SOURCE_INCOME_COLUMN,
    SOURCE_COUNTERPARTY_COLUMN,
    SOURCE_METHOD_COLUMN,
    SOURCE_ID_COLUMN,
)

# MoneyForward ME export columns
AGGREGATOR_INCLUDED_COLUMN = "計算対象"
AGGREGATOR_DATE_COLUMN = "日付"
AGGREGATOR_CONTENT_COLUMN = "内容"
AGGREGATOR_AMOUNT_COLUMN = "金額（円）"
AGGREGATOR_INSTITUTION_COLUMN = "保有金融機関"

AGGREGATOR_COLUMNS: Tuple[str, ...] = (
    AGGREGATOR_INCLUDED_COLUMN,
    AGGREGATOR_DATE_COLUMN,
    AGGREGATOR_CONTENT_COLUMN,
    AGGREGATOR_AMOUNT_COLUMN,
    AGGREGATOR_INSTITUTION_COLUMN,
)

UTF8_BOM = "\ufeff"


def parse_csv_text(text: str) -> Tuple[List[str], List[Row]]:
    """
    Parse CSV text into header labels and header-keyed rows.

    Every value is kept as the literal string from the file, header labels
    included. Fields missing from a short line come back as None. Lines with
    more fields than the header are dropped with a pandas ParserWarning.
    Repeated header labels stay in the header list, but each row keeps only
    the last value under such a label.

    Args:
        text: Decoded CSV text including the header line

    Returns:
        Tuple of (headers, rows). Both empty for empty input.

    Raises:
        ParsingError: If the text as a whole cannot be tokenized, e.g. a
            quote that is never closed swallows the rest of the file
    """
    if text.startswith(UTF8_BOM):
        text = text[len(UTF8_BOM):]

    if not text.strip():
        return [], []

    try:
        # Header read as a data line: no implicit index, no label mangling
        df = pd.read_csv(
            io.StringIO(text),
            header=None,
            index_col=False,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            on_bad_lines="warn",
        )
    except pd.errors.EmptyDataError:
        return [], []
    except (pd.errors.ParserError, ValueError) as e:
        logger.error(f"Failed to tokenize CSV text: {e}")
        raise ParsingError(
            "Invalid CSV text",
            details={"error": str(e)}
        )

    records = df.values.tolist()
    if not records:
        return [], []

    headers = ["" if pd.isna(label) else str(label) for label in records[0]]
    rows: List[Row] = [
        {key: (None if pd.isna(value) else value) for key, value in zip(headers, record)}
        for record in records[1:]
    ]

    logger.debug(f"Parsed {len(rows)} rows with {len(headers)} columns")
    return headers, rows


def check_columns(headers: Iterable[str], expected: Iterable[str], label: str) -> List[str]:
    """
    Log expected columns that are missing from a parsed header.

    Args:
        headers: Parsed header labels
        expected: Columns the caller relies on
        label: Human readable name of the input, for the log line

    Returns:
        Sorted list of missing column labels
    """
    missing = sorted(set(expected) - set(headers))
    if missing:
        logger.warning(f"Missing expected columns in {label}: {missing}")
        logger.debug(f"Available columns: {list(headers)}")
    return missing
