"""
Error taxonomy for the bridge.

Only ConfigurationError is fatal; every other error is logged at the point it
is caught and the call carries on (or, for tool errors, is reported back to the
model as a function call output).
"""

import json
from typing import Any, Dict


class BridgeError(Exception):
    """Base class for all bridge errors."""


class ConfigurationError(BridgeError):
    """Missing or unreadable startup configuration."""


class ProtocolParseError(BridgeError):
    """An inbound frame could not be parsed."""

    def __init__(self, message: str, raw: Any = None):
        super().__init__(message)
        self.raw = raw


class ChannelUnavailable(BridgeError):
    """A send was attempted on a channel that is not open."""


class ConfigEnrichmentFailure(BridgeError):
    """Caller metadata could not be resolved for the session configuration."""


class ToolError(BridgeError):
    """Base class for tool invocation failures."""

    kind = "tool_error"

    def __init__(self, tool_name: str, message: str):
        super().__init__(f"{tool_name}: {message}")
        self.tool_name = tool_name
        self.message = message

    def to_output(self) -> Dict[str, Any]:
        """Payload reported to the model in place of a tool result."""
        return {"error": self.kind, "tool": self.tool_name, "message": self.message}

    def to_json(self) -> str:
        return json.dumps(self.to_output())


class ToolNotFound(ToolError):
    kind = "not_found"


class ToolPreconditionFailed(ToolError):
    kind = "precondition_failed"


class ToolProviderFailure(ToolError):
    kind = "provider_failure"
