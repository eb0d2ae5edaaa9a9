"""
Per-call data carried by a bridge session.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class SessionState(str, Enum):
    """Lifecycle of a bridge session."""

    CONNECTING = "connecting"
    CONFIGURING = "configuring"
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"


class CallIdentity(BaseModel):
    """Identifiers captured from the Twilio start frame."""

    model_config = ConfigDict(frozen=True)

    stream_sid: str
    call_sid: Optional[str] = None
    caller_number: Optional[str] = None

    def with_caller_number(self, caller_number: Optional[str]) -> "CallIdentity":
        if not caller_number or self.caller_number:
            return self
        return self.model_copy(update={"caller_number": caller_number})


class PendingToolCall(BaseModel):
    """A function call emitted by the model, awaiting dispatch."""

    model_config = ConfigDict(frozen=True)

    invocation_id: str
    name: str
    arguments: str = ""


class ToolContext(BaseModel):
    """What a tool may know about the call it runs for."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    call_sid: Optional[str] = None
    stream_sid: Optional[str] = None
    caller_number: Optional[str] = None
    registry: Any = None


# Internal events posted to a session's queue
class ToolCallFinished(BaseModel):
    model_config = ConfigDict(frozen=True)

    invocation_id: str
    output: str


class ActivationTimeout(BaseModel):
    model_config = ConfigDict(frozen=True)
