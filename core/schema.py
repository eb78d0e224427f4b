"""
Pydantic models for pipeline inputs and outputs.
Stage results are frozen; only Chunk.imported is left for the caller to flip.
"""
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# One parsed CSV line keyed by header label. None marks a column the line did not reach.
Row = Dict[str, Optional[str]]

# Payment method -> rows in source order
GroupedRows = Dict[str, List[Row]]


class Stats(BaseModel):
    """Row count and date range of one input file (or set of files)."""
    model_config = ConfigDict(frozen=True)

    count: int = Field(default=0, ge=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class AggregatorStats(Stats):
    """Aggregator-side stats, extended with the number of dropped duplicates."""
    duplicates: Optional[int] = Field(default=None, ge=0)


class Transaction(BaseModel):
    """One economic event attributable to exactly one payment method."""
    model_config = ConfigDict(frozen=True)

    key: str
    row: Row
    payment_method: str


class ExtractionResult(BaseModel):
    """Output of the source export extractor."""
    model_config = ConfigDict(frozen=True)

    transactions: List[Transaction] = Field(default_factory=list)
    stats: Stats = Field(default_factory=Stats)
    headers: List[str] = Field(default_factory=list)


class ExclusionResult(BaseModel):
    """Dedup keys already recorded by the aggregator."""
    model_config = ConfigDict(frozen=True)

    keys: FrozenSet[str] = Field(default_factory=frozenset)
    stats: Stats = Field(default_factory=Stats)


class FilterResult(BaseModel):
    """Transactions grouped by payment method after deduplication."""
    model_config = ConfigDict(frozen=True)

    grouped: GroupedRows = Field(default_factory=dict)
    duplicates: int = Field(default=0, ge=0)


class Chunk(BaseModel):
    """
    One serialized, size-bounded output file.

    `imported` starts False and is owned by the caller afterwards.
    """
    data: str
    count: int = Field(..., ge=0)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    imported: bool = False


class ConversionResult(BaseModel):
    """Everything a caller needs to present one conversion run."""
    chunks: Dict[str, List[Chunk]] = Field(default_factory=dict)
    source_stats: Stats = Field(default_factory=Stats)
    aggregator_stats: AggregatorStats = Field(default_factory=AggregatorStats)
