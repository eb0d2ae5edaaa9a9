"""
Environment-driven settings for the bridge.

Values are read from the process environment (optionally seeded from a .env
file) into a pydantic model. Startup validation is separate from loading so the
FastAPI app can be imported without credentials, while run.py refuses to start
without them.
"""

import os
from pathlib import Path
from typing import List, Optional, Tuple

import dotenv
from pydantic import BaseModel, Field, field_validator

from app.config.constants import (
    CALL_SCREENING_SYSTEM_MESSAGE,
    DEFAULT_BING_SEARCH_URL,
    DEFAULT_REALTIME_MODEL,
    DEFAULT_REALTIME_URL,
    DEFAULT_TEMPERATURE,
    DEFAULT_VOICE,
    LOG_EVENT_TYPES,
    MINIMAL_SYSTEM_MESSAGE,
    VARIANT_CALL_SCREENING,
    VARIANT_MINIMAL,
)
from app.errors import ConfigurationError

SUPPORTED_VARIANTS = (VARIANT_MINIMAL, VARIANT_CALL_SCREENING)


def load_env_file(path: Path = Path(".") / ".env") -> None:
    """Load environment variables from a .env file if it exists."""
    if path.exists():
        dotenv.load_dotenv(path)


def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    """Runtime settings for one bridge process."""

    openai_api_key: Optional[str] = None
    realtime_model: str = DEFAULT_REALTIME_MODEL
    realtime_url: str = DEFAULT_REALTIME_URL
    variant: str = VARIANT_MINIMAL
    voice: str = DEFAULT_VOICE
    system_message: Optional[str] = None
    temperature: float = DEFAULT_TEMPERATURE
    log_event_types: Tuple[str, ...] = LOG_EVENT_TYPES

    bing_api_key: Optional[str] = None
    bing_search_url: str = DEFAULT_BING_SEARCH_URL

    twilio_account_sid: Optional[str] = None
    twilio_auth_token: Optional[str] = None
    transfer_number: Optional[str] = None
    public_stream_url: Optional[str] = None

    host: str = "0.0.0.0"
    port: int = Field(5050, ge=1, le=65535)
    ssl_certfile: Optional[str] = None
    ssl_keyfile: Optional[str] = None
    log_level: str = "INFO"

    @field_validator("variant")
    def validate_variant(cls, v):
        """Validate that the variant is one the bridge knows how to configure."""
        if v not in SUPPORTED_VARIANTS:
            raise ValueError(f"Unsupported bridge variant: {v} (expected one of {SUPPORTED_VARIANTS})")
        return v

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, ignoring unset ones."""
        env = {
            "openai_api_key": os.getenv("OPENAI_API_KEY"),
            "realtime_model": os.getenv("OPENAI_REALTIME_MODEL"),
            "realtime_url": os.getenv("OPENAI_REALTIME_URL"),
            "variant": os.getenv("BRIDGE_VARIANT"),
            "voice": os.getenv("VOICE"),
            "system_message": os.getenv("SYSTEM_MESSAGE"),
            "temperature": os.getenv("TEMPERATURE"),
            "log_event_types": _split_csv(os.getenv("LOG_EVENT_TYPES")),
            "bing_api_key": os.getenv("BING_API_KEY"),
            "bing_search_url": os.getenv("BING_SEARCH_URL"),
            "twilio_account_sid": os.getenv("TWILIO_ACCOUNT_SID"),
            "twilio_auth_token": os.getenv("TWILIO_AUTH_TOKEN"),
            "transfer_number": os.getenv("TRANSFER_NUMBER"),
            "public_stream_url": os.getenv("PUBLIC_STREAM_URL"),
            "host": os.getenv("HOST"),
            "port": os.getenv("PORT"),
            "ssl_certfile": os.getenv("SSL_CERTFILE"),
            "ssl_keyfile": os.getenv("SSL_KEYFILE"),
            "log_level": os.getenv("LOG_LEVEL"),
        }
        return cls(**{key: value for key, value in env.items() if value is not None})

    @property
    def instructions(self) -> str:
        if self.system_message:
            return self.system_message
        if self.variant == VARIANT_CALL_SCREENING:
            return CALL_SCREENING_SYSTEM_MESSAGE
        return MINIMAL_SYSTEM_MESSAGE

    @property
    def call_control_configured(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token)

    @property
    def search_configured(self) -> bool:
        return bool(self.bing_api_key)

    def validate_startup(self) -> None:
        """
        Check everything the process needs before it accepts calls.

        Raises:
            ConfigurationError: if a required credential is missing or TLS
                material cannot be read
        """
        if not self.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY environment variable not set")

        if self.variant == VARIANT_CALL_SCREENING:
            if not self.call_control_configured:
                raise ConfigurationError(
                    "TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN are required for the call_screening variant"
                )
            if not self.transfer_number:
                raise ConfigurationError("TRANSFER_NUMBER is required for the call_screening variant")

        if bool(self.ssl_certfile) != bool(self.ssl_keyfile):
            raise ConfigurationError("SSL_CERTFILE and SSL_KEYFILE must be set together")
        for path in (self.ssl_certfile, self.ssl_keyfile):
            if path and not os.access(path, os.R_OK):
                raise ConfigurationError(f"TLS file is not readable: {path}")
