"""
Pydantic models for the Twilio Media Streams WebSocket protocol.

This module defines the wire frames exchanged with Twilio and the typed events the
TelephonyChannel hands to the bridge session, plus the parser that turns one raw
text frame into one event.
"""

import json
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.config.constants import (
    TWILIO_EVENT_CLEAR,
    TWILIO_EVENT_MEDIA,
    TWILIO_EVENT_START,
    TWILIO_EVENT_STOP,
)
from app.errors import ProtocolParseError


# Inbound wire frames
class StartPayload(BaseModel):
    """The `start` block of a Twilio start frame."""

    streamSid: str = Field(..., description="Media stream identifier")
    callSid: Optional[str] = Field(None, description="Call identifier")
    accountSid: Optional[str] = None
    tracks: Optional[list] = None
    customParameters: Dict[str, str] = Field(default_factory=dict)


class StartMessage(BaseModel):
    """Model for the start frame sent once when the stream begins."""

    event: Literal["start"]
    start: StartPayload
    streamSid: Optional[str] = None


class MediaPayload(BaseModel):
    """The `media` block of a Twilio media frame."""

    payload: str = Field(..., description="Base64-encoded ulaw audio")
    track: Optional[str] = None
    chunk: Optional[str] = None
    timestamp: Optional[str] = None

    @field_validator("payload")
    def validate_payload(cls, v):
        """Validate that the payload is not empty."""
        if not v:
            raise ValueError("Media payload cannot be empty")
        return v


class MediaMessage(BaseModel):
    """Model for a media frame carrying one chunk of caller audio."""

    event: Literal["media"]
    media: MediaPayload
    streamSid: Optional[str] = None


# Outbound wire frames
class OutgoingMediaMessage(BaseModel):
    """Model for an audio frame sent back to Twilio for playback."""

    event: Literal["media"] = TWILIO_EVENT_MEDIA
    streamSid: str
    media: MediaPayload


class ClearMessage(BaseModel):
    """Model for the clear frame that flushes Twilio's playback buffer."""

    event: Literal["clear"] = TWILIO_EVENT_CLEAR
    streamSid: str


# Typed events delivered by the TelephonyChannel
class TelephonyStart(BaseModel):
    model_config = ConfigDict(frozen=True)

    stream_sid: str
    call_sid: Optional[str] = None


class TelephonyMedia(BaseModel):
    model_config = ConfigDict(frozen=True)

    payload: str


class TelephonyStop(BaseModel):
    model_config = ConfigDict(frozen=True)


class TelephonyOther(BaseModel):
    model_config = ConfigDict(frozen=True)

    event: str


class TelephonyClosed(BaseModel):
    model_config = ConfigDict(frozen=True)


TelephonyEvent = Union[TelephonyStart, TelephonyMedia, TelephonyStop, TelephonyOther, TelephonyClosed]


def parse_telephony_frame(text: str) -> TelephonyEvent:
    """
    Parse one Twilio Media Streams text frame into a typed event.

    Args:
        text: Raw JSON text received on the media stream WebSocket

    Returns:
        The typed event for the frame

    Raises:
        ProtocolParseError: if the frame is not valid JSON, has no event tag, or
            does not match the schema for its event
    """
    try:
        data: Any = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ProtocolParseError(f"Invalid JSON frame: {e}", raw=text) from e

    if not isinstance(data, dict) or not isinstance(data.get("event"), str):
        raise ProtocolParseError("Frame has no event tag", raw=text)

    event = data["event"]
    try:
        if event == TWILIO_EVENT_MEDIA:
            return TelephonyMedia(payload=MediaMessage(**data).media.payload)
        if event == TWILIO_EVENT_START:
            start = StartMessage(**data).start
            return TelephonyStart(stream_sid=start.streamSid, call_sid=start.callSid)
    except ValidationError as e:
        raise ProtocolParseError(f"Invalid {event} frame: {e}", raw=text) from e

    if event == TWILIO_EVENT_STOP:
        return TelephonyStop()
    return TelephonyOther(event=event)
