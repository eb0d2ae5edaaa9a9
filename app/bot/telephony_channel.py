"""
Twilio Media Streams side of the bridge.

Wraps the accepted FastAPI WebSocket for one call: inbound frames are parsed into
typed events, and outbound audio and clear commands are serialized as Twilio frames.
"""

import logging
from typing import AsyncIterator

from fastapi import WebSocket, WebSocketDisconnect

from app.config.constants import LOGGER_NAME
from app.errors import ChannelUnavailable, ProtocolParseError
from app.models.telephony_schemas import (
    ClearMessage,
    MediaPayload,
    OutgoingMediaMessage,
    TelephonyClosed,
    TelephonyEvent,
    TelephonyMedia,
    TelephonyOther,
    parse_telephony_frame,
)

logger = logging.getLogger(LOGGER_NAME)


class TelephonyChannel:
    """
    One Twilio media stream connection.

    The WebSocket must already be accepted. events() ends with a single
    TelephonyClosed when the stream disconnects or the channel is closed.
    """

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    async def events(self) -> AsyncIterator[TelephonyEvent]:
        """Yield typed events for each inbound frame, dropping malformed ones."""
        while self._open:
            try:
                text = await self.websocket.receive_text()
            except WebSocketDisconnect as e:
                logger.info(f"Twilio media stream disconnected (code {e.code})")
                break
            except RuntimeError as e:
                # Starlette raises RuntimeError when receiving on a closed socket
                logger.info(f"Twilio media stream no longer readable: {e}")
                break

            try:
                event = parse_telephony_frame(text)
            except ProtocolParseError as e:
                logger.error(f"Error parsing message: {e} Message: {str(text)[:200]}")
                continue

            if isinstance(event, TelephonyOther):
                logger.info(f"Received non-media event: {event.event}")
            elif not isinstance(event, TelephonyMedia):
                logger.info(f"Received {type(event).__name__}")
            yield event

        self._open = False
        yield TelephonyClosed()

    async def _send(self, text: str) -> bool:
        try:
            if not self._open:
                raise ChannelUnavailable("telephony channel is not open")
            await self.websocket.send_text(text)
            return True
        except ChannelUnavailable as e:
            logger.warning(f"Dropping outbound frame: {e}")
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.warning(f"Could not send to Twilio, stream is gone: {e}")
            self._open = False
        return False

    async def send_media(self, stream_sid: str, payload: str) -> bool:
        """Queue one base64 audio frame for playback, unchanged."""
        message = OutgoingMediaMessage(streamSid=stream_sid, media=MediaPayload(payload=payload))
        return await self._send(message.model_dump_json(exclude_none=True))

    async def send_clear(self, stream_sid: str) -> bool:
        """Discard any audio Twilio has buffered for playback."""
        return await self._send(ClearMessage(streamSid=stream_sid).model_dump_json())

    async def close(self) -> None:
        if not self._open:
            return
        self._open = False
        try:
            await self.websocket.close()
        except RuntimeError as e:
            logger.debug(f"Twilio media stream already closed: {e}")
        logger.info("Client disconnected.")
