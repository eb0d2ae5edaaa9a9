"""
Pydantic models for OpenAI Realtime API message structures.

This module provides type-safe models for the session configuration sent to the
Realtime API, the typed events the RealtimeChannel yields, and the parser that
maps a raw server event onto one of them.
"""

import json
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from app.config.constants import (
    AUDIO_FORMAT_G711_ULAW,
    DEFAULT_TEMPERATURE,
    DEFAULT_VOICE,
    EVENT_OUTPUT_ITEM_DONE,
    EVENT_RESPONSE_AUDIO_DELTA,
    EVENT_SESSION_UPDATE,
    EVENT_SESSION_UPDATED,
    EVENT_SPEECH_STARTED,
    EVENT_SPEECH_STOPPED,
    TURN_DETECTION_SERVER_VAD,
)
from app.errors import ProtocolParseError


class ToolSchema(BaseModel):
    """A function tool declared to the model."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def to_realtime(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


class SessionConfig(BaseModel):
    """Immutable configuration for one realtime session."""

    model_config = ConfigDict(frozen=True)

    voice: str = DEFAULT_VOICE
    instructions: str
    input_audio_format: str = AUDIO_FORMAT_G711_ULAW
    output_audio_format: str = AUDIO_FORMAT_G711_ULAW
    turn_detection_mode: str = TURN_DETECTION_SERVER_VAD
    temperature: float = DEFAULT_TEMPERATURE
    modalities: Tuple[str, ...] = ("text", "audio")
    tool_schemas: Tuple[ToolSchema, ...] = ()

    @property
    def tool_names(self) -> List[str]:
        return [schema.name for schema in self.tool_schemas]

    def to_session_update(self) -> Dict[str, Any]:
        """Render the session.update event for this configuration."""
        return {
            "type": EVENT_SESSION_UPDATE,
            "session": {
                "turn_detection": {"type": self.turn_detection_mode},
                "input_audio_format": self.input_audio_format,
                "output_audio_format": self.output_audio_format,
                "voice": self.voice,
                "instructions": self.instructions,
                "modalities": list(self.modalities),
                "temperature": self.temperature,
                "tools": [schema.to_realtime() for schema in self.tool_schemas],
            },
        }


# Typed events delivered by the RealtimeChannel
class AudioDelta(BaseModel):
    model_config = ConfigDict(frozen=True)

    delta: str


class SpeechStarted(BaseModel):
    model_config = ConfigDict(frozen=True)


class SpeechStopped(BaseModel):
    model_config = ConfigDict(frozen=True)


class FunctionCallCompleted(BaseModel):
    model_config = ConfigDict(frozen=True)

    invocation_id: str
    name: str
    arguments: str = ""


class SessionUpdated(BaseModel):
    model_config = ConfigDict(frozen=True)


class RealtimeOther(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    raw: Dict[str, Any] = Field(default_factory=dict)


class RealtimeChannelClosed(BaseModel):
    model_config = ConfigDict(frozen=True)


RealtimeEvent = Union[
    AudioDelta,
    SpeechStarted,
    SpeechStopped,
    FunctionCallCompleted,
    SessionUpdated,
    RealtimeOther,
    RealtimeChannelClosed,
]


class FunctionCallItem(BaseModel):
    """The item of a response.output_item.done event."""

    type: Literal["function_call"]
    name: str
    call_id: str
    arguments: Optional[str] = ""


def parse_realtime_event(message: Union[str, bytes]) -> RealtimeEvent:
    """
    Map one raw Realtime API server event onto a typed event.

    Raises:
        ProtocolParseError: if the message is not a JSON object with a type
    """
    try:
        data = json.loads(message)
    except (json.JSONDecodeError, TypeError, UnicodeDecodeError) as e:
        raise ProtocolParseError(f"Invalid JSON from realtime API: {e}", raw=message) from e

    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        raise ProtocolParseError("Realtime event has no type", raw=message)

    event_type = data["type"]
    if event_type == EVENT_RESPONSE_AUDIO_DELTA and data.get("delta"):
        return AudioDelta(delta=data["delta"])
    if event_type == EVENT_SPEECH_STARTED:
        return SpeechStarted()
    if event_type == EVENT_SPEECH_STOPPED:
        return SpeechStopped()
    if event_type == EVENT_SESSION_UPDATED:
        return SessionUpdated()
    if event_type == EVENT_OUTPUT_ITEM_DONE:
        item = data.get("item") or {}
        if item.get("type") == "function_call":
            try:
                call = FunctionCallItem(**item)
            except ValueError as e:
                raise ProtocolParseError(f"Invalid function call item: {e}", raw=message) from e
            return FunctionCallCompleted(
                invocation_id=call.call_id, name=call.name, arguments=call.arguments or ""
            )
    return RealtimeOther(type=event_type, raw=data)
