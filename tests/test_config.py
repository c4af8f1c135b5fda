"""Tests for settings and session event logging."""

import logging

import pytest
import structlog
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from billsplit.audit import SessionLogger, configure_logging
from billsplit.config import SplitSettings, get_settings
from billsplit.models.events import SessionEventBuilder
from billsplit.models.split import Currency
from billsplit.session import SplitSession


@pytest.fixture
def unconfigured_logging():
    """Start from structlog defaults and leave them behind afterwards."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
    logging.getLogger("billsplit").setLevel(logging.NOTSET)


class TestSettings:
    """Tests for SplitSettings."""

    def test_defaults(self):
        settings = get_settings()
        assert settings.default_split_name == "New Split"
        assert settings.default_currency == Currency.USD
        assert settings.max_amount == Decimal("1000000")
        assert settings.log_level == "INFO"
        assert settings.log_json is True

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("BILLSPLIT_DEFAULT_CURRENCY", "INR")
        monkeypatch.setenv("BILLSPLIT_LOG_LEVEL", "debug")
        monkeypatch.setenv("BILLSPLIT_LOG_JSON", "false")
        get_settings.cache_clear()
        settings = get_settings()
        assert settings.default_currency == Currency.INR
        assert settings.log_level == "DEBUG"
        assert settings.log_json is False

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            SplitSettings(log_level="LOUD")

    def test_rejects_non_positive_maximum(self):
        with pytest.raises(ValidationError):
            SplitSettings(max_amount=0)


class TestSessionLogger:
    """Tests for SessionLogger."""

    def test_log_keeps_history(self):
        logger = SessionLogger()
        event = SessionEventBuilder.split_renamed(uuid4(), "Dinner")
        assert logger.log(event) is True
        assert logger.history == [event]

    def test_history_can_be_disabled(self):
        logger = SessionLogger(keep_history=False)
        logger.log(SessionEventBuilder.split_renamed(uuid4(), "Dinner"))
        assert logger.history == []

    def test_history_is_a_copy(self):
        logger = SessionLogger()
        logger.log(SessionEventBuilder.split_renamed(uuid4(), "Dinner"))
        logger.history.clear()
        assert len(logger.history) == 1

    def test_logging_failure_does_not_raise(self):
        """Test a broken log backend is reported, not raised."""

        class BrokenLogger:
            def info(self, *args, **kwargs):
                raise RuntimeError("disk full")

        logger = SessionLogger()
        logger._logger = BrokenLogger()
        event = SessionEventBuilder.split_renamed(uuid4(), "Dinner")
        assert logger.log(event) is False
        assert logger.history == [event]

    @pytest.mark.parametrize("json", [True, False])
    def test_configure_logging(self, json, unconfigured_logging):
        """Test both renderers can be configured and used."""
        configure_logging(level="DEBUG", json=json)
        logger = SessionLogger()
        event = SessionEventBuilder.amount_rejected(uuid4(), "tip", "-5", "Tip cannot be negative")
        assert logger.log(event) is True

    def test_configure_logging_rejects_unknown_level(self):
        with pytest.raises(ValueError):
            configure_logging(level="verbose")

    def test_level_names_are_case_insensitive(self, unconfigured_logging):
        configure_logging(level=" warning ")
        assert logging.getLogger("billsplit").level == logging.WARNING


class TestLoggingSetup:
    """A session logger configures structlog when nobody else has."""

    def test_logger_configures_structlog(self, unconfigured_logging):
        assert not structlog.is_configured()
        SessionLogger()
        assert structlog.is_configured()

    def test_debug_events_stay_off_stdout(self, unconfigured_logging, capsys):
        """Test recompute events are filtered at the default INFO level."""
        session = SplitSession(logger=SessionLogger())
        session.add_participant("Alice")
        assert "results_recomputed" not in capsys.readouterr().out

    def test_level_comes_from_settings(self, unconfigured_logging, monkeypatch):
        monkeypatch.setenv("BILLSPLIT_LOG_LEVEL", "WARNING")
        get_settings.cache_clear()
        SessionLogger()
        assert logging.getLogger("billsplit").level == logging.WARNING

    def test_existing_configuration_is_kept(self, unconfigured_logging):
        """Test an application's own structlog setup is not replaced."""
        configure_logging(level="ERROR")
        SessionLogger()
        assert logging.getLogger("billsplit").level == logging.ERROR


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
