"""
Handlers for Twilio's HTTP webhooks.

Key components:
- call_handlers: Builds the TwiML that answers an inbound call and connects its
  audio to the /media-stream WebSocket.

Usage examples:
```python
from app.handlers.call_handlers import build_incoming_call_twiml, resolve_stream_url

twiml = build_incoming_call_twiml(resolve_stream_url(request.headers.get("host")))
```
"""

from app.handlers.call_handlers import build_incoming_call_twiml, resolve_stream_url

__all__ = ["build_incoming_call_twiml", "resolve_stream_url"]
