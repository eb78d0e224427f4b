"""
Conversion service.
Encapsulates the PayPay to MoneyForward ME conversion workflow.
"""
from typing import Any, Dict, Iterable

from core.config import get_settings
from core.exceptions import DataNotFoundError, ValidationError
from core.exclusion import build_exclusion_set
from core.exporters import create_chunks, create_output_filename
from core.extraction import extract_transactions
from core.filtering import filter_transactions
from core.logger import setup_logger
from core.schema import AggregatorStats, ConversionResult, ExclusionResult, ExtractionResult

logger = setup_logger(__name__)


class ConversionService:
    """Service for running exports through the conversion pipeline."""

    def __init__(self):
        """Initialize conversion service."""
        self.settings = get_settings()

    def load_source(self, csv_text: str) -> ExtractionResult:
        """
        Extract transactions from a PayPay export, rejecting unusable files.

        Args:
            csv_text: Decoded PayPay CSV text

        Returns:
            Extraction result with at least one transaction

        Raises:
            DataNotFoundError: If no transactions could be read
        """
        result = extract_transactions(csv_text)
        if not result.transactions:
            logger.warning(f"No transactions found in PayPay export ({result.stats.count} rows)")
            raise DataNotFoundError(
                "No transactions could be read from the PayPay CSV file",
                details={"rows": result.stats.count}
            )
        return result

    def load_aggregator(self, csv_texts: Iterable[str]) -> ExclusionResult:
        """
        Build the exclusion set from MoneyForward ME exports, rejecting unusable files.

        A file where every row is flagged as not counted is accepted as long
        as its dates parse.

        Args:
            csv_texts: Decoded MoneyForward ME CSV texts

        Returns:
            Exclusion result

        Raises:
            DataNotFoundError: If the files contain no rows
            ValidationError: If rows were read but none look like MoneyForward ME rows
        """
        result = build_exclusion_set(csv_texts)
        stats = result.stats

        if stats.count == 0:
            logger.warning("No rows found in MoneyForward ME exports")
            raise DataNotFoundError("No transactions could be read from the MoneyForward ME CSV files")

        if not result.keys and stats.start_date is None and stats.end_date is None:
            logger.warning(f"{stats.count} rows read but none carry a MoneyForward ME date")
            raise ValidationError(
                "The selected files do not look like MoneyForward ME exports",
                details={"rows": stats.count}
            )

        return result

    def build_result(
        self,
        extraction: ExtractionResult,
        exclusion: ExclusionResult,
    ) -> ConversionResult:
        """
        Filter and chunk already-parsed inputs.

        Args:
            extraction: Transactions extracted from the PayPay export
            exclusion: Keys already present in MoneyForward ME

        Returns:
            Conversion result; chunks is empty when nothing is left to import
        """
        filtered = filter_transactions(extraction.transactions, exclusion.keys)
        chunks = create_chunks(filtered.grouped, extraction.headers, self.settings.chunk_size)

        aggregator_stats = AggregatorStats(
            count=exclusion.stats.count,
            start_date=exclusion.stats.start_date,
            end_date=exclusion.stats.end_date,
            duplicates=filtered.duplicates,
        )

        if not chunks:
            logger.warning("Nothing left to convert after deduplication")

        return ConversionResult(
            chunks=chunks,
            source_stats=extraction.stats,
            aggregator_stats=aggregator_stats,
        )

    def convert(self, source_text: str, aggregator_texts: Iterable[str] = ()) -> ConversionResult:
        """
        Run the full pipeline on decoded export texts.

        Args:
            source_text: Decoded PayPay CSV text
            aggregator_texts: Decoded MoneyForward ME CSV texts, may be empty

        Returns:
            Conversion result
        """
        logger.info(f"Starting conversion ({self.settings.app_name})")
        extraction = extract_transactions(source_text)
        exclusion = build_exclusion_set(aggregator_texts)
        return self.build_result(extraction, exclusion)

    def build_summary(self, result: ConversionResult) -> Dict[str, Any]:
        """
        Build a presentation-ready summary of a conversion.

        Args:
            result: Conversion result

        Returns:
            Dictionary with per-method files and overall totals
        """
        methods = {}
        for name, chunks in result.chunks.items():
            methods[name] = {
                "total": sum(chunk.count for chunk in chunks),
                "files": [
                    {
                        "filename": create_output_filename(
                            name, index, len(chunks), self.settings.output_filename_prefix
                        ),
                        "count": chunk.count,
                        "start_date": chunk.start_date.isoformat() if chunk.start_date else None,
                        "end_date": chunk.end_date.isoformat() if chunk.end_date else None,
                        "imported": chunk.imported,
                    }
                    for index, chunk in enumerate(chunks)
                ],
            }

        converted = sum(method["total"] for method in methods.values())
        duplicates = result.aggregator_stats.duplicates or 0

        return {
            "methods": methods,
            "source_rows": result.source_stats.count,
            "aggregator_rows": result.aggregator_stats.count,
            "converted": converted,
            "duplicates": duplicates,
            "all_duplicates": converted == 0 and duplicates > 0,
        }
