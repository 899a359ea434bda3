"""Settings loading and logging setup."""

import logging
from decimal import Decimal

from finplan.config import Settings
from finplan.core.logging_config import configure_logging


def test_defaults():
    s = Settings()
    assert s.forecast_default_days == 90
    assert s.default_low_balance_threshold == Decimal("100.00")
    assert s.default_alert_days_ahead == 7
    assert s.default_include_variable_spending is True
    assert s.default_safety_buffer == Decimal("500")
    assert s.is_production is False


def test_environment_override(monkeypatch):
    monkeypatch.setenv("FINPLAN_FORECAST_DEFAULT_DAYS", "30")
    monkeypatch.setenv("FINPLAN_APP_ENV", "production")
    monkeypatch.setenv("FINPLAN_DEFAULT_SAFETY_BUFFER", "750")

    s = Settings()

    assert s.forecast_default_days == 30
    assert s.is_production is True
    assert s.default_safety_buffer == Decimal("750")


def test_configure_logging_sets_level_once():
    s = Settings(log_level="debug")

    logger = configure_logging(s)
    configure_logging(s)

    assert logger.name == "finplan"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
