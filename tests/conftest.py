import asyncio
import logging

import pytest

from app.models.openai_schemas import RealtimeChannelClosed, SessionUpdated
from app.models.telephony_schemas import TelephonyClosed


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


class FakeTelephonyChannel:
    """Telephony channel driven by a queue; records every outbound frame in order."""

    def __init__(self, log):
        self.log = log
        self.inbound = asyncio.Queue()
        self._open = True
        self.close_calls = 0

    @property
    def is_open(self):
        return self._open

    async def events(self):
        while True:
            event = await self.inbound.get()
            if isinstance(event, TelephonyClosed):
                self._open = False
            yield event
            if isinstance(event, TelephonyClosed):
                return

    async def send_media(self, stream_sid, payload):
        self.log.append(("telephony", "media", stream_sid, payload))
        return True

    async def send_clear(self, stream_sid):
        self.log.append(("telephony", "clear", stream_sid))
        return True

    async def close(self):
        self.close_calls += 1
        self._open = False


class FakeRealtimeChannel:
    """Realtime channel driven by a queue; acknowledges configuration when asked to."""

    def __init__(self, log, acknowledge_config=True, connect_result=True):
        self.log = log
        self.inbound = asyncio.Queue()
        self.acknowledge_config = acknowledge_config
        self.connect_result = connect_result
        self._open = False
        self.connect_calls = 0
        self.close_calls = 0
        self.config = None

    @property
    def is_open(self):
        return self._open

    async def connect(self):
        self.connect_calls += 1
        self._open = self.connect_result
        return self.connect_result

    async def events(self):
        while True:
            event = await self.inbound.get()
            if isinstance(event, RealtimeChannelClosed):
                self._open = False
            yield event
            if isinstance(event, RealtimeChannelClosed):
                return

    async def send_config(self, config):
        self.config = config
        self.log.append(("realtime", "session.update"))
        if self.acknowledge_config:
            await self.inbound.put(SessionUpdated())
        return True

    async def send_audio_append(self, payload):
        self.log.append(("realtime", "input_audio_buffer.append", payload))
        return True

    async def send_tool_result(self, invocation_id, output):
        self.log.append(("realtime", "conversation.item.create", invocation_id, output))
        return True

    async def send_continue(self):
        self.log.append(("realtime", "response.create"))
        return True

    async def cancel_response(self):
        self.log.append(("realtime", "response.cancel"))
        return True

    async def close(self):
        self.close_calls += 1
        self._open = False


@pytest.fixture
def channel_log():
    """Ordered record of every outbound send across both fake channels."""
    return []


@pytest.fixture
def fake_telephony(channel_log):
    return FakeTelephonyChannel(channel_log)


@pytest.fixture
def fake_realtime(channel_log):
    return FakeRealtimeChannel(channel_log)


async def _wait_until(predicate, timeout=2.0):
    """Poll until predicate() is true, failing the test on timeout."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


@pytest.fixture
def wait_until():
    return _wait_until


@pytest.fixture
def realtime_factory(channel_log):
    """Build a FakeRealtimeChannel sharing the channel log, with custom behaviour."""
    def _make(**kwargs):
        return FakeRealtimeChannel(channel_log, **kwargs)
    return _make
