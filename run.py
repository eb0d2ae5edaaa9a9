"""
Run script for starting the Twilio Realtime Bridge server.

This script validates configuration, then starts the FastAPI server with WebSocket
settings suited to real-time audio between Twilio and OpenAI. Startup refuses to
continue when required credentials or TLS material are missing.

Usage:
    python run.py [--port PORT] [--host HOST] [--log-level LEVEL]
"""

import argparse
import sys

import uvicorn
from pydantic import ValidationError

from app.config.logging_config import configure_logging
from app.config.settings import Settings, load_env_file
from app.errors import ConfigurationError

load_env_file()

logger = configure_logging()


def parse_args(settings: Settings):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Start the Twilio Realtime Bridge server"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="Port to run the server on (default: 5050 or PORT env var)",
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help="Host to bind the server to (default: 0.0.0.0 or HOST env var)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )
    return parser.parse_args()


def main():
    """Main entry point for starting the server."""
    try:
        settings = Settings.from_env()
        settings.validate_startup()
    except (ConfigurationError, ValidationError) as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"Error: {e}")
        sys.exit(1)

    args = parse_args(settings)
    configure_logging(args.log_level)

    logger.info(f"Starting server on {'https' if settings.ssl_certfile else 'http'}://{args.host}:{args.port}")
    logger.info(f"Bridge variant: {settings.variant}")
    logger.info(f"Search enabled: {settings.search_configured}")
    logger.info(f"Call control enabled: {settings.call_control_configured}")

    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        ssl_certfile=settings.ssl_certfile,
        ssl_keyfile=settings.ssl_keyfile,
        # Use HTTP/1.1 for lower overhead than HTTP/2
        http="h11",
        ws_ping_interval=5,
        ws_ping_timeout=20,
        ws_max_size=16777216,
        # Disable access logs for lower overhead, we have our own logging
        access_log=False,
    )


if __name__ == "__main__":
    main()
