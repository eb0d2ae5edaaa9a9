"""
Configuration module for the Twilio to OpenAI Realtime bridge.

This module provides centralized configuration management for the entire application,
including constants, logging setup, and environment-based settings.

Key components:
- constants: Protocol event names, default model settings, and the persona prompts
  used by each bridge variant.
- logging_config: Provides a consistent logging infrastructure with support for
  console and file-based logging with rotation capabilities.
- settings: Environment-driven settings with startup validation.

Usage examples:
```python
from app.config.constants import LOGGER_NAME, DEFAULT_REALTIME_MODEL
from app.config.logging_config import configure_logging
from app.config.settings import Settings

logger = configure_logging()
settings = Settings.from_env()
settings.validate_startup()
```
"""

# Config module initialization
