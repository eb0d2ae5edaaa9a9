import asyncio
import json
import logging
import socket
import time
from typing import Any, AsyncIterator, Dict, Iterable, Optional

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, ConnectionClosedOK

from app.config.constants import (
    DEFAULT_REALTIME_URL,
    EVENT_CONVERSATION_ITEM_CREATE,
    EVENT_ERROR,
    EVENT_INPUT_AUDIO_APPEND,
    EVENT_OUTPUT_ITEM_DONE,
    EVENT_RESPONSE_AUDIO_DELTA,
    EVENT_RESPONSE_CANCEL,
    EVENT_RESPONSE_CREATE,
    EVENT_SPEECH_STARTED,
    EVENT_SPEECH_STOPPED,
    LOG_EVENT_TYPES,
    LOGGER_NAME,
    REALTIME_BETA_HEADER,
)
from app.errors import ChannelUnavailable, ProtocolParseError
from app.models.openai_schemas import (
    AudioDelta,
    FunctionCallCompleted,
    RealtimeChannelClosed,
    RealtimeEvent,
    RealtimeOther,
    SessionConfig,
    SessionUpdated,
    SpeechStarted,
    SpeechStopped,
    parse_realtime_event,
)

logger = logging.getLogger(LOGGER_NAME)

# Wire names of typed events, for the diagnostic allow-list
EVENT_LOG_NAMES = {
    AudioDelta: EVENT_RESPONSE_AUDIO_DELTA,
    SpeechStarted: EVENT_SPEECH_STARTED,
    SpeechStopped: EVENT_SPEECH_STOPPED,
    FunctionCallCompleted: EVENT_OUTPUT_ITEM_DONE,
}

CONNECTION_TIMEOUT = 30  # seconds
SEND_TIMEOUT = 5.0  # seconds

# WebSocket configuration for low latency
WS_MAX_SIZE = 16 * 1024 * 1024  # 16MB - large enough for audio chunks
WS_MAX_QUEUE = 32  # Small queue to prevent buffering
WS_PING_INTERVAL = 5  # 5 seconds between pings


class RealtimeChannel:
    """
    Connection to the OpenAI Realtime API for one call.

    Outbound operations are fire-and-forget: a send on a channel that is not open
    is logged and dropped. Inbound server events are exposed as a typed stream via
    events(), which always ends with a single RealtimeChannelClosed.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        url: str = DEFAULT_REALTIME_URL,
        log_event_types: Iterable[str] = LOG_EVENT_TYPES,
    ):
        self.api_key = api_key
        self.model = model
        self.url = url
        self.log_event_types = frozenset(log_event_types)
        self.ws = None
        self._open = False
        logger.info(f"RealtimeChannel initialized with model: {model}")

    @property
    def is_open(self) -> bool:
        return self._open and self.ws is not None

    async def connect(self) -> bool:
        """
        Connect to the OpenAI Realtime WebSocket endpoint.

        Returns:
            bool: True if connection was successful, False otherwise
        """
        url = f"{self.url}?model={self.model}"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "OpenAI-Beta": REALTIME_BETA_HEADER,
        }

        try:
            logger.info(f"Connecting to OpenAI Realtime API with model: {self.model}")
            logger.debug(f"WebSocket URL: {url}")
            connection_start = time.time()
            self.ws = await asyncio.wait_for(
                websockets.connect(
                    url,
                    max_size=WS_MAX_SIZE,
                    max_queue=WS_MAX_QUEUE,
                    ping_interval=WS_PING_INTERVAL,
                    ping_timeout=10,
                    compression=None,  # Disable compression for lower latency
                    additional_headers=headers,
                ),
                timeout=CONNECTION_TIMEOUT,
            )
            logger.debug(f"WebSocket connection established in {time.time() - connection_start:.2f} seconds")
        except asyncio.TimeoutError:
            logger.error(f"Timeout while connecting to OpenAI Realtime API (after {CONNECTION_TIMEOUT}s)")
            return False
        except Exception as e:
            logger.error(f"Failed to connect to OpenAI Realtime API: {e}", exc_info=True)
            return False

        self._optimize_socket()
        self._open = True
        logger.info("Connected to the OpenAI Realtime API")
        return True

    def _optimize_socket(self) -> None:
        transport = getattr(self.ws, "transport", None)
        sock = transport.get_extra_info("socket") if transport is not None else None
        if not isinstance(sock, socket.socket):
            return
        try:
            # Disable Nagle's algorithm to send packets immediately
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            logger.debug("Optimized OpenAI socket: TCP_NODELAY enabled")
        except OSError as e:
            logger.warning(f"Could not optimize OpenAI socket: {e}")

    async def events(self) -> AsyncIterator[RealtimeEvent]:
        """
        Yield typed events from the server until the connection closes.

        Malformed messages are logged and skipped.
        """
        if self.ws is not None:
            try:
                async for message in self.ws:
                    try:
                        event = parse_realtime_event(message)
                    except ProtocolParseError as e:
                        logger.warning(f"Dropping realtime message: {e}")
                        continue
                    self._log_event(event)
                    yield event
            except ConnectionClosedOK:
                logger.info("OpenAI WebSocket connection closed normally")
            except ConnectionClosedError as e:
                logger.warning(f"OpenAI WebSocket connection closed unexpectedly: {e}")

        self._open = False
        logger.info("Disconnected from the OpenAI Realtime API")
        yield RealtimeChannelClosed()

    def _log_event(self, event: RealtimeEvent) -> None:
        if isinstance(event, SessionUpdated):
            logger.info("Session updated successfully")
            return
        if isinstance(event, RealtimeOther):
            if event.type == EVENT_ERROR:
                logger.error(f"Received error from OpenAI: {event.raw}")
            elif event.type in self.log_event_types:
                logger.info(f"Received event: {event.type} {event.raw}")
            return
        event_type = EVENT_LOG_NAMES.get(type(event))
        if event_type in self.log_event_types:
            logger.info(f"Received event: {event_type} {event!r}")

    async def _send(self, event: Dict[str, Any]) -> bool:
        try:
            if not self.is_open:
                raise ChannelUnavailable(f"realtime channel is not open, dropping {event.get('type')}")
            await asyncio.wait_for(self.ws.send(json.dumps(event)), timeout=SEND_TIMEOUT)
            return True
        except ChannelUnavailable as e:
            logger.warning(str(e))
        except asyncio.TimeoutError:
            logger.warning(f"Timeout while sending {event.get('type')}")
        except ConnectionClosed as e:
            logger.warning(f"Connection closed while sending {event.get('type')}: {e}")
            self._open = False
        return False

    async def send_config(self, config: SessionConfig) -> bool:
        session_update = config.to_session_update()
        logger.info(f"Sending session update: {json.dumps(session_update)}")
        return await self._send(session_update)

    async def send_audio_append(self, payload: str) -> bool:
        """Append one base64 audio frame to the input buffer, unchanged."""
        return await self._send({"type": EVENT_INPUT_AUDIO_APPEND, "audio": payload})

    async def send_tool_result(self, invocation_id: str, output: str) -> bool:
        return await self._send({
            "type": EVENT_CONVERSATION_ITEM_CREATE,
            "item": {
                "type": "function_call_output",
                "call_id": invocation_id,
                "output": output,
            },
        })

    async def send_continue(self) -> bool:
        """Ask the model to produce its next response."""
        return await self._send({"type": EVENT_RESPONSE_CREATE})

    async def cancel_response(self) -> bool:
        """Abort the response in progress, if any."""
        return await self._send({"type": EVENT_RESPONSE_CANCEL})

    async def close(self) -> None:
        """
        Close the WebSocket connection.
        """
        if not self.is_open:
            return
        logger.info("Closing OpenAI Realtime channel")
        self._open = False
        try:
            await self.ws.close()
        except Exception as e:
            logger.warning(f"Error closing OpenAI WebSocket: {e}")
        logger.info("OpenAI Realtime channel closed")
