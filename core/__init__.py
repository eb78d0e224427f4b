"""
Core processing modules for PayPay CSV conversion.

This package contains:
- config: Application configuration and settings
- exceptions: Custom exception classes
- exclusion: MoneyForward ME exclusion key set
- exporters: Chunking and CSV serialization
- extraction: PayPay transaction extraction
- filtering: Deduplication and grouping
- logger: Logging configuration
- normalize: Date and amount normalization
- parsing: CSV parsing
- schema: Pydantic models for pipeline data
"""
