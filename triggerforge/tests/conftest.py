import pytest

from triggerforge.core.config import DEFAULT_SYMBOL_ALIASES, settings


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch):
    """
    Pin settings so a local .env never changes engine behaviour under test.
    """
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setattr(settings, "APP_ENV", "dev")
    monkeypatch.setattr(settings, "PRICE_SIGNIFICANT_DIGITS", 6)
    monkeypatch.setattr(settings, "DEFAULT_ORDER_TYPE", "stop_loss")
    monkeypatch.setattr(settings, "ENFORCE_BORROW_LIMIT", True)
    monkeypatch.setattr(settings, "TOKEN_SYMBOL_ALIASES", dict(DEFAULT_SYMBOL_ALIASES))
