"""
Centralized configuration management.
All environment variables and settings are defined here.
"""
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# MoneyForward ME rejects imports above this many rows
MAX_IMPORT_ROWS = 100


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="PayPay CSV Optimizer", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Output
    chunk_size: int = Field(default=MAX_IMPORT_ROWS, alias="CHUNK_SIZE")
    output_filename_prefix: str = Field(default="paypay", alias="OUTPUT_FILENAME_PREFIX")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v_upper

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v):
        """Validate chunk size fits the aggregator import limit."""
        if v < 1:
            raise ValueError("Chunk size must be at least 1")
        if v > MAX_IMPORT_ROWS:
            raise ValueError(f"Chunk size must not exceed {MAX_IMPORT_ROWS}")
        return v

    @field_validator("output_filename_prefix")
    @classmethod
    def validate_prefix(cls, v):
        """Reject prefixes that would escape the download directory."""
        if not v or "/" in v or "\\" in v:
            raise ValueError("Output filename prefix must be a non-empty plain name")
        return v


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
