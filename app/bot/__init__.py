"""
Bot module bridging Twilio Media Streams with the OpenAI Realtime API.

This module provides the per-call components that carry a phone conversation
between the caller and the realtime model.

Key components:
- TelephonyChannel: Wraps Twilio's media stream WebSocket, turning frames into typed
  events and sending audio and clear frames back.
- RealtimeChannel: Client for the OpenAI Realtime API WebSocket, exposing server
  events as a typed stream and sending audio, configuration and tool results.
- SessionConfigBuilder: Produces the session configuration for each call, per
  bridge variant, optionally enriched with the caller's number.
- BridgeSession: The per-call state machine that relays audio in both directions,
  handles barge-in, and dispatches the model's tool calls.

Usage examples:
```python
from app.bot import BridgeSession, RealtimeChannel, SessionConfigBuilder, TelephonyChannel

session = BridgeSession(
    telephony=TelephonyChannel(websocket),
    realtime=RealtimeChannel(api_key, model),
    config_builder=SessionConfigBuilder(supported_tools=invoker.supported_tools),
    tool_invoker=invoker,
    registry=registry,
)
await session.run()
```
"""

from app.bot.bridge_session import BridgeSession
from app.bot.realtime_channel import RealtimeChannel
from app.bot.session_config import SessionConfigBuilder
from app.bot.telephony_channel import TelephonyChannel

__all__ = ["BridgeSession", "RealtimeChannel", "SessionConfigBuilder", "TelephonyChannel"]
