"""
Configuration management for the billing records package.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BillingRecordsConfig(BaseSettings):
    """Configuration settings for billing records."""

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="standard", alias="LOG_FORMAT")
    log_file: Optional[Path] = Field(default=None, alias="LOG_FILE")

    # Storage Configuration
    billing_data_file: Path = Field(
        default=Path("data/billing_records.json"), alias="BILLING_DATA_FILE"
    )
    reference_data_file: Optional[Path] = Field(
        default=None, alias="REFERENCE_DATA_FILE"
    )
    export_dir: Path = Field(default=Path("exports"), alias="EXPORT_DIR")

    # CSV Configuration
    csv_delimiter: str = Field(default=",", alias="CSV_DELIMITER")
    skipped_row_preview_length: int = Field(
        default=50, ge=1, alias="SKIPPED_ROW_PREVIEW_LENGTH"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ["standard", "json"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("csv_delimiter")
    @classmethod
    def validate_csv_delimiter(cls, v):
        """Ensure the delimiter is a single character other than a quote."""
        if len(v) != 1 or v in ('"', "\r", "\n"):
            raise ValueError("CSV delimiter must be a single non-quote character")
        return v


def load_config(env_file: Optional[str] = None) -> BillingRecordsConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return BillingRecordsConfig()


# Global configuration instance
_config: Optional[BillingRecordsConfig] = None


def get_config() -> BillingRecordsConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> BillingRecordsConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
