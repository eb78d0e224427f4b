"""
CSV exporters that cut grouped rows into MoneyForward ME sized chunks.
Chunks keep the original PayPay columns and column order.
"""
import re
from typing import Dict, List, Optional, Sequence

import pandas as pd

from core.config import MAX_IMPORT_ROWS, get_settings
from core.exceptions import ExportError, ValidationError
from core.logger import setup_logger
from core.normalize import parse_date, update_date_range
from core.parsing import SOURCE_DATE_COLUMN
from core.schema import Chunk, GroupedRows, Row

logger = setup_logger(__name__)


def serialize_rows(rows: Sequence[Row], headers: Sequence[str]) -> str:
    """
    Serialize rows to CSV text with a header line.

    Values are quoted only where needed, so reparsing with the same headers
    yields the same strings. Lines end in CRLF, which makes the writer quote
    any value holding a lone CR or LF.

    Args:
        rows: Rows to write
        headers: Column order

    Returns:
        CSV text

    Raises:
        ExportError: If serialization fails
    """
    try:
        df = pd.DataFrame(
            [[row.get(column) for column in headers] for row in rows],
            columns=list(headers),
        )
        return df.to_csv(index=False, lineterminator="\r\n")
    except Exception as e:
        logger.error(f"Failed to serialize {len(rows)} rows: {e}")
        raise ExportError(
            "Failed to serialize rows to CSV",
            details={"rows": len(rows), "columns": len(headers), "error": str(e)}
        )


def build_chunk(rows: Sequence[Row], headers: Sequence[str]) -> Chunk:
    """Serialize one window of rows and compute its own date range."""
    start_date = end_date = None
    for row in rows:
        start_date, end_date = update_date_range(
            parse_date(row.get(SOURCE_DATE_COLUMN)), start_date, end_date
        )

    return Chunk(
        data=serialize_rows(rows, headers),
        count=len(rows),
        start_date=start_date,
        end_date=end_date,
        imported=False,
    )


def create_chunks(
    grouped: GroupedRows,
    headers: Sequence[str],
    chunk_size: Optional[int] = None,
) -> Dict[str, List[Chunk]]:
    """
    Cut each payment method's rows into importable chunks.

    Args:
        grouped: Rows grouped by payment method, in source order
        headers: Column order for the output CSV
        chunk_size: Maximum rows per chunk (defaults to configured value)

    Returns:
        Chunks per payment method. Empty groups produce no entry.
    """
    if chunk_size is None:
        chunk_size = get_settings().chunk_size
    if not 1 <= chunk_size <= MAX_IMPORT_ROWS:
        raise ValidationError(
            f"Chunk size must be between 1 and {MAX_IMPORT_ROWS}",
            details={"chunk_size": chunk_size}
        )

    chunks: Dict[str, List[Chunk]] = {}
    for name, rows in grouped.items():
        if not rows:
            continue
        chunks[name] = [
            build_chunk(rows[start:start + chunk_size], headers)
            for start in range(0, len(rows), chunk_size)
        ]
        logger.debug(f"{name}: {len(rows)} rows -> {len(chunks[name])} chunks")

    logger.info(
        f"Created {sum(len(c) for c in chunks.values())} chunks "
        f"for {len(chunks)} payment methods"
    )
    return chunks


def create_output_filename(name: str, index: int, total: int, prefix: Optional[str] = None) -> str:
    """
    Create the download filename for one chunk.

    Format: {prefix}-{method}.csv, with _part{n} appended when the method
    was split into several chunks.

    Args:
        name: Payment method name
        index: Zero-based chunk index within the method
        total: Number of chunks for the method
        prefix: Filename prefix (defaults to configured value)

    Returns:
        Filename
    """
    if prefix is None:
        prefix = get_settings().output_filename_prefix

    slug = re.sub(r"\s", "-", name.lower())
    part = f"_part{index + 1}" if total > 1 else ""
    return f"{prefix}-{slug}{part}.csv"
