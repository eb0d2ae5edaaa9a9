"""
Handles the inbound-call webhook from Twilio.

Twilio requests this webhook when a call arrives; the TwiML response greets the
caller and connects the call audio to the bridge's /media-stream WebSocket.
"""

import logging
from typing import Optional

from twilio.twiml.voice_response import Connect, VoiceResponse

from app.config.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)

MEDIA_STREAM_PATH = "/media-stream"


def resolve_stream_url(host: Optional[str], public_stream_url: Optional[str] = None) -> str:
    """
    Work out the WebSocket URL Twilio should stream the call to.

    Args:
        host: The Host header of the webhook request
        public_stream_url: Explicitly configured stream URL, used when set

    Returns:
        The wss:// URL of the media stream endpoint
    """
    if public_stream_url:
        return public_stream_url
    return f"wss://{host or 'localhost'}{MEDIA_STREAM_PATH}"


def build_incoming_call_twiml(stream_url: str, greeting: str = "Connecting.") -> str:
    """
    Build the TwiML answering an inbound call.

    Args:
        stream_url: WebSocket URL for the media stream
        greeting: Text spoken to the caller before the stream connects

    Returns:
        The TwiML document as a string
    """
    response = VoiceResponse()
    response.say(greeting)
    connect = Connect()
    connect.stream(url=stream_url)
    response.append(connect)
    logger.info(f"Answering incoming call with stream {stream_url}")
    return str(response)
