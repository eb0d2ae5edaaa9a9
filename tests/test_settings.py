"""
Unit tests for environment-driven settings and startup validation.
"""

import pytest
from pydantic import ValidationError

from app.config.constants import CALL_SCREENING_SYSTEM_MESSAGE, MINIMAL_SYSTEM_MESSAGE
from app.config.settings import Settings
from app.errors import ConfigurationError

ENV_VARS = [
    "OPENAI_API_KEY", "OPENAI_REALTIME_MODEL", "OPENAI_REALTIME_URL", "BRIDGE_VARIANT", "VOICE",
    "SYSTEM_MESSAGE", "TEMPERATURE", "LOG_EVENT_TYPES", "BING_API_KEY", "BING_SEARCH_URL",
    "TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TRANSFER_NUMBER", "PUBLIC_STREAM_URL", "HOST",
    "PORT", "SSL_CERTFILE", "SSL_KEYFILE", "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings.from_env()

    assert settings.openai_api_key is None
    assert settings.variant == "minimal"
    assert settings.port == 5050
    assert settings.voice == "shimmer"
    assert settings.instructions == MINIMAL_SYSTEM_MESSAGE
    assert not settings.search_configured
    assert not settings.call_control_configured


def test_from_env(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-test")
    clean_env.setenv("BRIDGE_VARIANT", "call_screening")
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("TEMPERATURE", "0.6")
    clean_env.setenv("LOG_EVENT_TYPES", "error, session.created,")
    clean_env.setenv("BING_API_KEY", "bing-key")

    settings = Settings.from_env()

    assert settings.openai_api_key == "sk-test"
    assert settings.port == 8080
    assert settings.temperature == 0.6
    assert settings.log_event_types == ("error", "session.created")
    assert settings.instructions == CALL_SCREENING_SYSTEM_MESSAGE
    assert settings.search_configured


def test_system_message_override(clean_env):
    clean_env.setenv("SYSTEM_MESSAGE", "You are a receptionist.")

    assert Settings.from_env().instructions == "You are a receptionist."


@pytest.mark.parametrize("name, value", [("BRIDGE_VARIANT", "voicemail"), ("PORT", "0"), ("PORT", "http")])
def test_invalid_values(clean_env, name, value):
    clean_env.setenv(name, value)

    with pytest.raises(ValidationError):
        Settings.from_env()


def test_missing_api_key():
    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        Settings().validate_startup()


def test_minimal_needs_only_api_key():
    Settings(openai_api_key="sk-test").validate_startup()


def test_call_screening_requires_twilio():
    settings = Settings(openai_api_key="sk-test", variant="call_screening", transfer_number="+1555")

    with pytest.raises(ConfigurationError, match="TWILIO_ACCOUNT_SID"):
        settings.validate_startup()


def test_call_screening_requires_transfer_number():
    settings = Settings(
        openai_api_key="sk-test",
        variant="call_screening",
        twilio_account_sid="AC123",
        twilio_auth_token="token",
    )

    with pytest.raises(ConfigurationError, match="TRANSFER_NUMBER"):
        settings.validate_startup()


def test_tls_files_must_be_paired(tmp_path):
    cert = tmp_path / "cert.pem"
    cert.write_text("cert")

    with pytest.raises(ConfigurationError, match="together"):
        Settings(openai_api_key="sk-test", ssl_certfile=str(cert)).validate_startup()


def test_tls_files_must_exist(tmp_path):
    cert = tmp_path / "cert.pem"
    cert.write_text("cert")
    settings = Settings(
        openai_api_key="sk-test", ssl_certfile=str(cert), ssl_keyfile=str(tmp_path / "missing.pem")
    )

    with pytest.raises(ConfigurationError, match="not readable"):
        settings.validate_startup()


def test_tls_files_readable(tmp_path):
    cert = tmp_path / "cert.pem"
    key = tmp_path / "key.pem"
    cert.write_text("cert")
    key.write_text("key")

    Settings(openai_api_key="sk-test", ssl_certfile=str(cert), ssl_keyfile=str(key)).validate_startup()
