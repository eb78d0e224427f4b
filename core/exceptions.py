"""
Custom exceptions for better error handling.
"""
from typing import Any, Dict, Optional


class ConverterException(Exception):
    """Base exception for all CSV conversion errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ParsingError(ConverterException):
    """Raised when CSV text cannot be tokenized."""
    pass


class ValidationError(ConverterException):
    """Raised when data validation fails."""
    pass


class ExportError(ConverterException):
    """Raised when chunk serialization fails."""
    pass


class DataNotFoundError(ConverterException):
    """Raised when required data is not found."""
    pass
