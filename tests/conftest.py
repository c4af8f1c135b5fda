"""Shared fixtures for Bill Splitter tests."""

import pytest

from billsplit.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Every test starts from default settings, unaffected by the environment."""
    for var in (
        "BILLSPLIT_DEFAULT_SPLIT_NAME",
        "BILLSPLIT_DEFAULT_CURRENCY",
        "BILLSPLIT_MAX_AMOUNT",
        "BILLSPLIT_LOG_LEVEL",
        "BILLSPLIT_LOG_JSON",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
