"""
WebSocket connection manager for Twilio Media Streams.

This module implements the server-side handling of the /media-stream endpoint,
providing the infrastructure to:
- Accept the WebSocket connection from Twilio
- Build the per-call BridgeSession and its collaborators
- Track active sessions in the process-wide SessionRegistry

The WebSocketManager owns the collaborators that are shared across calls (search
client, Twilio REST client, registry) and hands each call its own channels.
"""

import logging
from typing import Optional

from fastapi import WebSocket
from pydantic import ValidationError

from app.bot.bridge_session import BridgeSession
from app.bot.realtime_channel import RealtimeChannel
from app.bot.session_config import SessionConfigBuilder
from app.bot.telephony_channel import TelephonyChannel
from app.config.constants import LOGGER_NAME
from app.config.settings import Settings
from app.models.session_registry import SessionRegistry
from app.services.call_control import TwilioCallControl
from app.services.web_search import BingSearchClient
from app.tools.invoker import ToolInvoker

logger = logging.getLogger(LOGGER_NAME)


class WebSocketManager:
    """Accepts Twilio media stream connections and runs one BridgeSession per call."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self.registry = SessionRegistry()
        self._tool_invoker: Optional[ToolInvoker] = None
        self._call_control: Optional[TwilioCallControl] = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = Settings.from_env()
        return self._settings

    @property
    def call_control(self) -> Optional[TwilioCallControl]:
        if self._call_control is None and self.settings.call_control_configured:
            self._call_control = TwilioCallControl(
                self.settings.twilio_account_sid, self.settings.twilio_auth_token
            )
        return self._call_control

    @property
    def tool_invoker(self) -> ToolInvoker:
        if self._tool_invoker is None:
            settings = self.settings
            search_client = None
            if settings.search_configured:
                search_client = BingSearchClient(settings.bing_api_key, settings.bing_search_url)
            self._tool_invoker = ToolInvoker(
                search_client=search_client,
                call_control=self.call_control,
                transfer_number=settings.transfer_number,
            )
            logger.info(f"Tools available: {self._tool_invoker.supported_tools}")
        return self._tool_invoker

    def create_session(self, websocket: WebSocket) -> BridgeSession:
        """Build the channels and collaborators for one call."""
        settings = self.settings
        config_builder = SessionConfigBuilder(
            variant=settings.variant,
            supported_tools=self.tool_invoker.supported_tools,
            instructions=settings.instructions,
            voice=settings.voice,
            temperature=settings.temperature,
            caller_lookup=self.call_control,
        )
        realtime = RealtimeChannel(
            settings.openai_api_key,
            settings.realtime_model,
            url=settings.realtime_url,
            log_event_types=settings.log_event_types,
        )
        return BridgeSession(
            telephony=TelephonyChannel(websocket),
            realtime=realtime,
            config_builder=config_builder,
            tool_invoker=self.tool_invoker,
            registry=self.registry,
        )

    async def handle_websocket(self, websocket: WebSocket) -> None:
        """Handle a Twilio media stream connection for the life of the call.

        Args:
            websocket (WebSocket): The FastAPI WebSocket connection object

        The session ends when Twilio sends stop, either socket closes, or the
        realtime connection cannot be established. Errors inside the session are
        logged; they never propagate to the ASGI server.
        """
        await websocket.accept()
        logger.info("Client connected")

        try:
            session = self.create_session(websocket)
            await session.run()
        except ValidationError as e:
            logger.error(f"Invalid configuration, rejecting media stream: {e}")
            await websocket.close(code=1011)
        except Exception as e:
            logger.error(f"Error in media stream session: {e}", exc_info=True)
        logger.info(f"Media stream finished; {len(self.registry)} active sessions")
