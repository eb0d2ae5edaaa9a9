"""
Unit tests for the Twilio Media Streams schemas.

These tests check that raw text frames are parsed into the right typed events and
that malformed frames are rejected with ProtocolParseError.
"""

import json

import pytest
from pydantic import ValidationError

from app.errors import ProtocolParseError
from app.models.telephony_schemas import (
    ClearMessage,
    MediaPayload,
    OutgoingMediaMessage,
    TelephonyMedia,
    TelephonyOther,
    TelephonyStart,
    TelephonyStop,
    parse_telephony_frame,
)


class TestParseTelephonyFrame:
    """Tests for parse_telephony_frame."""

    def test_start_frame(self):
        """A start frame yields the stream and call identifiers."""
        frame = json.dumps({
            "event": "start",
            "sequenceNumber": "1",
            "start": {
                "streamSid": "MZ123",
                "callSid": "CA456",
                "accountSid": "AC789",
                "tracks": ["inbound"],
                "customParameters": {},
            },
            "streamSid": "MZ123",
        })

        event = parse_telephony_frame(frame)

        assert event == TelephonyStart(stream_sid="MZ123", call_sid="CA456")

    def test_start_frame_without_call_sid(self):
        event = parse_telephony_frame('{"event": "start", "start": {"streamSid": "MZ123"}}')

        assert isinstance(event, TelephonyStart)
        assert event.call_sid is None

    def test_media_frame(self):
        """The media payload is passed through unchanged."""
        frame = json.dumps({
            "event": "media",
            "streamSid": "MZ123",
            "media": {"track": "inbound", "chunk": "2", "timestamp": "5", "payload": "/v7+fn5+"},
        })

        event = parse_telephony_frame(frame)

        assert event == TelephonyMedia(payload="/v7+fn5+")

    def test_stop_frame(self):
        assert isinstance(parse_telephony_frame('{"event": "stop", "streamSid": "MZ123"}'), TelephonyStop)

    @pytest.mark.parametrize("event_name", ["connected", "mark", "dtmf"])
    def test_other_frames(self, event_name):
        event = parse_telephony_frame(json.dumps({"event": event_name}))

        assert event == TelephonyOther(event=event_name)

    @pytest.mark.parametrize("frame", [
        "not json",
        "[1, 2, 3]",
        '{"streamSid": "MZ123"}',
        '{"event": 5}',
        '{"event": "start", "start": {}}',
        '{"event": "media", "media": {"payload": ""}}',
        '{"event": "media"}',
    ])
    def test_invalid_frames(self, frame):
        """Malformed frames raise ProtocolParseError carrying the raw text."""
        with pytest.raises(ProtocolParseError) as exc_info:
            parse_telephony_frame(frame)

        assert exc_info.value.raw == frame


class TestOutgoingFrames:
    """Tests for frames sent back to Twilio."""

    def test_outgoing_media(self):
        message = OutgoingMediaMessage(streamSid="MZ123", media=MediaPayload(payload="AAAA"))

        assert json.loads(message.model_dump_json(exclude_none=True)) == {
            "event": "media",
            "streamSid": "MZ123",
            "media": {"payload": "AAAA"},
        }

    def test_clear(self):
        message = ClearMessage(streamSid="MZ123")

        assert json.loads(message.model_dump_json()) == {"event": "clear", "streamSid": "MZ123"}

    def test_empty_payload_rejected(self):
        with pytest.raises(ValidationError):
            MediaPayload(payload="")
