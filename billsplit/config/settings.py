"""
Configuration Management for Bill Splitter

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Defaults cover everything, so the package works with no environment at all;
a `.env` file or `BILLSPLIT_*` variables only override them.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from billsplit.models.split import Currency

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
SPLIT_NAME_MAX_LENGTH = 100


class SplitSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BILLSPLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Session defaults
    default_split_name: str = Field(
        default="New Split",
        min_length=1,
        max_length=SPLIT_NAME_MAX_LENGTH,
        description="Name given to a freshly created split"
    )
    default_currency: Currency = Field(
        default=Currency.USD,
        description="Display currency for a freshly created split"
    )

    # Validation thresholds
    max_amount: Decimal = Field(
        default=Decimal("1000000"),
        gt=0,
        description="Largest price, tax or tip accepted by the validator"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for session event logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False = human readable console)"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only allow standard logging level names."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {list(LOG_LEVELS)}")
        return level


@lru_cache()
def get_settings() -> SplitSettings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return SplitSettings()
