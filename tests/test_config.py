import pytest
import structlog
from pydantic import ValidationError

from tabsplit.config import Settings, get_settings
from tabsplit.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_JSON", raising=False)

    settings = get_settings()

    assert settings.log_level == "INFO"
    assert settings.log_json is True


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_JSON", "false")

    settings = get_settings()

    assert settings.log_level == "DEBUG"
    assert settings.log_json is False
    assert get_settings() is settings


def test_settings_rejects_unknown_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "loud")
    with pytest.raises(ValidationError):
        get_settings()


def test_configure_logging_console():
    configure_logging(Settings(LOG_LEVEL="warning", LOG_JSON=False))

    assert structlog.is_configured()
    assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
    get_logger("tests").warning("config.checked", level="warning")


def test_configure_logging_json():
    configure_logging(Settings(LOG_LEVEL="INFO", LOG_JSON=True))

    assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)
