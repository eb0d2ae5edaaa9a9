"""
Per-call bridge between a Twilio media stream and an OpenAI Realtime session.

Both channels are pumped into one asyncio.Queue and a single consumer applies every
state change and outbound send, so the barge-in sequence and tool results are
ordered with respect to audio relay. Tool calls run as background tasks and post
their results back onto the same queue.
"""

import asyncio
import json
import logging
import time
from typing import Any, AsyncIterator, Optional, Set

from app.config.constants import (
    LOGGER_NAME,
    SESSION_ACTIVATION_TIMEOUT,
    SESSION_STABILIZATION_DELAY,
)
from app.errors import ToolError, ToolProviderFailure
from app.models.call import (
    ActivationTimeout,
    CallIdentity,
    PendingToolCall,
    SessionState,
    ToolCallFinished,
    ToolContext,
)
from app.models.openai_schemas import (
    AudioDelta,
    FunctionCallCompleted,
    RealtimeChannelClosed,
    RealtimeOther,
    SessionConfig,
    SessionUpdated,
    SpeechStarted,
    SpeechStopped,
)
from app.models.session_registry import SessionRegistry
from app.models.telephony_schemas import (
    TelephonyClosed,
    TelephonyMedia,
    TelephonyOther,
    TelephonyStart,
    TelephonyStop,
)

logger = logging.getLogger(LOGGER_NAME)


class BridgeSession:
    """
    State machine for one phone call.

    States run connecting -> configuring -> active -> closing -> closed. Audio and
    barge-in are only acted on while active. Function calls are answered from
    configuring onward, since the model may emit one before session.updated
    arrives. Anything else arriving out of state is logged and ignored.
    """

    def __init__(
        self,
        telephony,
        realtime,
        config_builder,
        tool_invoker,
        registry: SessionRegistry,
        stabilization_delay: float = SESSION_STABILIZATION_DELAY,
        activation_timeout: float = SESSION_ACTIVATION_TIMEOUT,
    ):
        """
        Args:
            telephony: The TelephonyChannel for the call
            realtime: The (not yet connected) RealtimeChannel for the call
            config_builder: SessionConfigBuilder producing the session configuration
            tool_invoker: ToolInvoker running the model's function calls
            registry: Process-wide SessionRegistry
            stabilization_delay: Seconds to wait after connecting before sending the configuration
            activation_timeout: Seconds to wait for session.updated before going active anyway
        """
        self.telephony = telephony
        self.realtime = realtime
        self.config_builder = config_builder
        self.tool_invoker = tool_invoker
        self.registry = registry
        self.stabilization_delay = stabilization_delay
        self.activation_timeout = activation_timeout

        self.state = SessionState.CONNECTING
        self.identity: Optional[CallIdentity] = None
        self.config: Optional[SessionConfig] = None
        self.started_at = time.time()

        self._queue: asyncio.Queue = asyncio.Queue()
        self._realtime_requested = False
        self._dispatched_calls: Set[str] = set()
        self._background: Set[asyncio.Task] = set()
        self._tool_tasks: Set[asyncio.Task] = set()

    @property
    def stream_sid(self) -> Optional[str]:
        return self.identity.stream_sid if self.identity else None

    @property
    def call_sid(self) -> Optional[str]:
        return self.identity.call_sid if self.identity else None

    async def run(self) -> None:
        """Process events until the session is closed."""
        self._spawn(self._pump(self.telephony.events(), TelephonyClosed()), self._background)
        try:
            while self.state != SessionState.CLOSED:
                event = await self._queue.get()
                await self.dispatch(event)
        finally:
            await self.close("session ended")
            for task in list(self._background):
                task.cancel()

    async def dispatch(self, event: Any) -> None:
        """Apply one event to the session. Only called from the consumer."""
        if isinstance(event, TelephonyMedia):
            if self.state == SessionState.ACTIVE:
                await self.realtime.send_audio_append(event.payload)
        elif isinstance(event, AudioDelta):
            if self.state == SessionState.ACTIVE:
                await self.telephony.send_media(self.stream_sid, event.delta)
        elif isinstance(event, SpeechStarted):
            if self.state == SessionState.ACTIVE:
                await self._barge_in()
        elif isinstance(event, FunctionCallCompleted):
            self._dispatch_tool_call(event)
        elif isinstance(event, ToolCallFinished):
            await self._deliver_tool_result(event)
        elif isinstance(event, TelephonyStart):
            await self._handle_start(event)
        elif isinstance(event, (SessionUpdated, ActivationTimeout)):
            if self.state == SessionState.CONFIGURING:
                self._activate(event)
        elif isinstance(event, (TelephonyStop, TelephonyClosed)):
            await self.close("telephony stream ended")
        elif isinstance(event, RealtimeChannelClosed):
            await self.close("realtime channel closed")
        elif isinstance(event, SpeechStopped):
            logger.debug(f"Caller stopped speaking on stream {self.stream_sid}")
        elif isinstance(event, (TelephonyOther, RealtimeOther)):
            pass
        else:
            logger.warning(f"Ignoring unexpected event {event!r}")

    async def _handle_start(self, event: TelephonyStart) -> None:
        if self.identity is not None:
            logger.warning(f"Ignoring repeated start for stream {event.stream_sid}")
            return
        self.identity = CallIdentity(stream_sid=event.stream_sid, call_sid=event.call_sid)
        logger.info(f"Incoming stream has started {event.stream_sid} (call {event.call_sid})")
        if event.call_sid:
            self.registry.register(event.call_sid, self)
        await self._open_realtime()

    async def _open_realtime(self) -> None:
        if self._realtime_requested:
            return
        self._realtime_requested = True

        if not await self.realtime.connect():
            logger.error(f"Could not connect realtime channel for stream {self.stream_sid}")
            await self.close("realtime connect failed")
            return
        self._spawn(self._pump(self.realtime.events(), RealtimeChannelClosed()), self._background)

        # Give the remote session a moment to initialize before configuring it
        await asyncio.sleep(self.stabilization_delay)
        caller_number = await self.config_builder.resolve_caller_number(self.identity)
        self.identity = self.identity.with_caller_number(caller_number)
        self.config = self.config_builder.build(self.identity)
        await self.realtime.send_config(self.config)

        self.state = SessionState.CONFIGURING
        self._spawn(self._activation_timer(), self._background)

    def _activate(self, reason: Any) -> None:
        self.state = SessionState.ACTIVE
        how = "acknowledged" if isinstance(reason, SessionUpdated) else "timer"
        logger.info(f"Session active for stream {self.stream_sid} ({how})")

    async def _barge_in(self) -> None:
        logger.info(f"Caller interrupted on stream {self.stream_sid}; clearing playback and cancelling response")
        await self.telephony.send_clear(self.stream_sid)
        await self.realtime.cancel_response()

    def _dispatch_tool_call(self, event: FunctionCallCompleted) -> None:
        if self.state not in (SessionState.CONFIGURING, SessionState.ACTIVE):
            logger.warning(f"Ignoring function call {event.name} while {self.state.value}")
            return
        if event.invocation_id in self._dispatched_calls:
            logger.warning(f"Ignoring duplicate function call {event.invocation_id} ({event.name})")
            return
        self._dispatched_calls.add(event.invocation_id)

        pending = PendingToolCall(
            invocation_id=event.invocation_id, name=event.name, arguments=event.arguments
        )
        context = ToolContext(
            call_sid=self.call_sid,
            stream_sid=self.stream_sid,
            caller_number=self.identity.caller_number if self.identity else None,
            registry=self.registry,
        )
        self._spawn(self._run_tool_call(pending, context), self._tool_tasks)

    async def _run_tool_call(self, pending: PendingToolCall, context: ToolContext) -> None:
        try:
            result = await self.tool_invoker.invoke(pending.name, pending.arguments, context)
            output = json.dumps(result)
        except ToolError as e:
            logger.warning(f"Tool call {pending.invocation_id} failed: {e}")
            output = e.to_json()
        except (TypeError, ValueError) as e:
            logger.error(f"Tool {pending.name} returned a result that is not JSON: {e}")
            output = ToolProviderFailure(pending.name, "result is not JSON-serializable").to_json()
        await self._queue.put(ToolCallFinished(invocation_id=pending.invocation_id, output=output))

    async def _deliver_tool_result(self, event: ToolCallFinished) -> None:
        if self.state in (SessionState.CLOSING, SessionState.CLOSED):
            logger.info(f"Discarding result of tool call {event.invocation_id}; session is {self.state.value}")
            return
        await self.realtime.send_tool_result(event.invocation_id, event.output)
        await self.realtime.send_continue()

    async def close(self, reason: str = "closed") -> None:
        """
        Tear the session down. Safe to call more than once.
        """
        if self.state in (SessionState.CLOSING, SessionState.CLOSED):
            return
        self.state = SessionState.CLOSING
        logger.info(f"Closing session for stream {self.stream_sid}: {reason}")

        if self.call_sid:
            self.registry.remove(self.call_sid, self)
        for channel in (self.telephony, self.realtime):
            if channel.is_open:
                await channel.close()
        for task in list(self._tool_tasks):
            task.cancel()

        self.state = SessionState.CLOSED
        logger.info(f"Session closed for stream {self.stream_sid} after {time.time() - self.started_at:.1f}s")

    async def _pump(self, events: AsyncIterator[Any], closed_event: Any) -> None:
        try:
            async for event in events:
                await self._queue.put(event)
        except Exception as e:
            logger.error(f"Channel event stream failed: {e}", exc_info=True)
            await self._queue.put(closed_event)

    async def _activation_timer(self) -> None:
        await asyncio.sleep(self.activation_timeout)
        await self._queue.put(ActivationTimeout())

    @staticmethod
    def _spawn(coro, tasks: Set[asyncio.Task]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        tasks.add(task)
        task.add_done_callback(tasks.discard)
        return task
