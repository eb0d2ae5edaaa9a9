"""
Models module for data structures and state management in the bridge.

This module provides structured data models for both wire protocols and for the
per-call state the bridge keeps.

Key components:
- telephony_schemas: Pydantic models for Twilio Media Streams frames and the typed
  events parsed from them.
- openai_schemas: The realtime session configuration, tool schemas, and the typed
  events parsed from OpenAI Realtime API server messages.
- call: Call identity, pending tool calls, and the session lifecycle states.
- session_registry: Thread-safe registry of active sessions keyed by call sid.

Usage examples:
```python
from app.models.telephony_schemas import parse_telephony_frame

event = parse_telephony_frame('{"event": "start", "start": {"streamSid": "S1", "callSid": "C1"}}')

from app.models.session_registry import SessionRegistry

registry = SessionRegistry()
registry.register("C1", session)
registry.remove("C1")
```
"""

from app.models.call import CallIdentity, PendingToolCall, SessionState, ToolContext
from app.models.openai_schemas import (
    AudioDelta,
    FunctionCallCompleted,
    RealtimeChannelClosed,
    RealtimeOther,
    SessionConfig,
    SessionUpdated,
    SpeechStarted,
    SpeechStopped,
    ToolSchema,
)
from app.models.session_registry import SessionRegistry
from app.models.telephony_schemas import (
    TelephonyClosed,
    TelephonyMedia,
    TelephonyOther,
    TelephonyStart,
    TelephonyStop,
)
