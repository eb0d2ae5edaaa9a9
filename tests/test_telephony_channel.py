"""
Unit tests for the Twilio media stream channel.
"""

import json
from unittest.mock import AsyncMock

import pytest
from fastapi import WebSocket, WebSocketDisconnect

from app.bot.telephony_channel import TelephonyChannel
from app.models.telephony_schemas import (
    TelephonyClosed,
    TelephonyMedia,
    TelephonyOther,
    TelephonyStart,
    TelephonyStop,
)


@pytest.fixture
def websocket():
    return AsyncMock(spec=WebSocket)


@pytest.fixture
def channel(websocket):
    return TelephonyChannel(websocket)


@pytest.mark.asyncio
async def test_events_from_frames(channel, websocket):
    """Frames are parsed in order; malformed frames are dropped; a disconnect ends the stream."""
    websocket.receive_text.side_effect = [
        json.dumps({"event": "connected", "protocol": "Call", "version": "1.0.0"}),
        json.dumps({"event": "start", "start": {"streamSid": "MZ1", "callSid": "CA1"}}),
        "garbage",
        json.dumps({"event": "media", "media": {"payload": "AAAA"}}),
        json.dumps({"event": "stop"}),
        WebSocketDisconnect(code=1000),
    ]

    events = [event async for event in channel.events()]

    assert events == [
        TelephonyOther(event="connected"),
        TelephonyStart(stream_sid="MZ1", call_sid="CA1"),
        TelephonyMedia(payload="AAAA"),
        TelephonyStop(),
        TelephonyClosed(),
    ]
    assert not channel.is_open


@pytest.mark.asyncio
async def test_events_end_on_closed_socket(channel, websocket):
    websocket.receive_text.side_effect = RuntimeError('WebSocket is not connected. Need to call "accept" first.')

    events = [event async for event in channel.events()]

    assert events == [TelephonyClosed()]


@pytest.mark.asyncio
async def test_send_media(channel, websocket):
    assert await channel.send_media("MZ1", "BBBB")

    sent = json.loads(websocket.send_text.await_args.args[0])
    assert sent == {"event": "media", "streamSid": "MZ1", "media": {"payload": "BBBB"}}


@pytest.mark.asyncio
async def test_send_clear(channel, websocket):
    assert await channel.send_clear("MZ1")

    sent = json.loads(websocket.send_text.await_args.args[0])
    assert sent == {"event": "clear", "streamSid": "MZ1"}


@pytest.mark.asyncio
async def test_send_after_close_dropped(channel, websocket):
    await channel.close()

    assert not await channel.send_media("MZ1", "BBBB")
    websocket.send_text.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_on_disconnected_socket(channel, websocket):
    websocket.send_text.side_effect = WebSocketDisconnect(code=1006)

    assert not await channel.send_clear("MZ1")
    assert not channel.is_open


@pytest.mark.asyncio
async def test_close_once(channel, websocket):
    await channel.close()
    await channel.close()

    websocket.close.assert_awaited_once()
