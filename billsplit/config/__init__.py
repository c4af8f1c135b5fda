"""Configuration package."""

from billsplit.config.settings import (
    LOG_LEVELS,
    SPLIT_NAME_MAX_LENGTH,
    SplitSettings,
    get_settings,
)

__all__ = [
    "LOG_LEVELS",
    "SPLIT_NAME_MAX_LENGTH",
    "SplitSettings",
    "get_settings",
]
