"""
Unit tests for the Twilio Realtime Bridge.

These tests verify the functionality of the TwilioRealtimeBridge class, which
relays one call between the Twilio media stream and the OpenAI Realtime API.
"""

import asyncio
import json
from unittest.mock import AsyncMock, PropertyMock

import pytest

from call_relay.bot.realtime_api import RealtimeClient
from call_relay.bot.twilio_realtime_bridge import BridgeState, TwilioRealtimeBridge
from call_relay.models.session import CallSession


class MockWebSocket:
    """A simple websocket mock that records sent messages."""
    def __init__(self, *args, **kwargs):
        self.sent_messages = []

    async def send_text(self, text):
        """Record the sent message."""
        self.sent_messages.append(text)


@pytest.fixture
def mock_client():
    """Create a mock RealtimeClient whose link is open."""
    mock = AsyncMock(spec=RealtimeClient)
    type(mock).is_open = PropertyMock(return_value=True)
    mock.connect.return_value = True
    return mock


@pytest.fixture
def session():
    return CallSession(call_id="CA123")


@pytest.fixture
def telephony_ws():
    return MockWebSocket()


@pytest.fixture
def bridge(session, telephony_ws, mock_client):
    """Create a TwilioRealtimeBridge instance for testing."""
    return TwilioRealtimeBridge("CA123", session, telephony_ws, mock_client, session_update_delay=0)


def sent_events(mock_client):
    return [c.args[0].model_dump() for c in mock_client.send_event.call_args_list]


@pytest.mark.asyncio
async def test_start_then_media_forwards_audio(bridge, mock_client, session):
    """A start event records the stream id and media is appended to the input buffer."""
    await bridge.handle_telephony_message(json.dumps({"event": "start", "start": {"streamSid": "SID1"}}))
    await bridge.handle_telephony_message(json.dumps({"event": "media", "media": {"payload": "QQ=="}}))

    assert session.stream_sid == "SID1"
    assert sent_events(mock_client) == [{"type": "input_audio_buffer.append", "audio": "QQ=="}]


@pytest.mark.asyncio
async def test_media_dropped_when_link_not_open(bridge, mock_client):
    """Frames arriving before the link opens are dropped without error."""
    type(mock_client).is_open = PropertyMock(return_value=False)

    await bridge.handle_telephony_message(json.dumps({"event": "media", "media": {"payload": "QQ=="}}))

    mock_client.send_event.assert_not_called()


@pytest.mark.asyncio
async def test_stream_sid_unset_without_start(bridge, session):
    await bridge.handle_telephony_message(json.dumps({"event": "connected", "protocol": "Call"}))
    await bridge.handle_telephony_message(json.dumps({"event": "media", "media": {"payload": "QQ=="}}))
    await bridge.handle_telephony_message(json.dumps({"event": "stop"}))

    assert session.stream_sid is None


@pytest.mark.asyncio
async def test_invalid_start_event_is_ignored(bridge, session):
    await bridge.handle_telephony_message(json.dumps({"event": "start", "start": {}}))
    assert session.stream_sid is None


@pytest.mark.asyncio
async def test_malformed_telephony_message_does_not_stop_relay(bridge, mock_client, relay_logs):
    await bridge.handle_telephony_message("not json{")
    await bridge.handle_telephony_message("[1, 2, 3]")
    await bridge.handle_telephony_message(json.dumps({"event": "media", "media": {"payload": "QQ=="}}))

    assert "not json{" in relay_logs.text
    assert sent_events(mock_client) == [{"type": "input_audio_buffer.append", "audio": "QQ=="}]


@pytest.mark.asyncio
async def test_audio_delta_forwarded_to_caller(bridge, session, telephony_ws):
    session.set_stream_sid("SID1")

    await bridge.handle_realtime_message(json.dumps({"type": "response.audio.delta", "delta": "QQ=="}))

    assert len(telephony_ws.sent_messages) == 1
    assert json.loads(telephony_ws.sent_messages[0]) == {
        "event": "media",
        "streamSid": "SID1",
        "media": {"payload": "QQ=="},
    }


@pytest.mark.asyncio
async def test_empty_audio_delta_not_forwarded(bridge, telephony_ws):
    await bridge.handle_realtime_message(json.dumps({"type": "response.audio.delta", "delta": ""}))
    assert telephony_ws.sent_messages == []


@pytest.mark.asyncio
async def test_invalid_base64_delta_is_logged(bridge, telephony_ws, relay_logs):
    await bridge.handle_realtime_message(json.dumps({"type": "response.audio.delta", "delta": "Q"}))

    assert telephony_ws.sent_messages == []
    assert "Error processing OpenAI message" in relay_logs.text


@pytest.mark.asyncio
async def test_malformed_realtime_message_is_logged(bridge, relay_logs):
    await bridge.handle_realtime_message("{broken")
    assert "Raw message: {broken" in relay_logs.text


@pytest.mark.asyncio
async def test_transcript_follows_event_order(bridge, session):
    events = [
        {"type": "conversation.item.input_audio_transcription.completed", "transcript": "  hi  "},
        {
            "type": "response.done",
            "response": {"output": [{"content": [{"type": "audio", "transcript": "hello"}]}]},
        },
        {"type": "conversation.item.input_audio_transcription.completed", "transcript": "bye"},
    ]
    for event in events:
        await bridge.handle_realtime_message(json.dumps(event))

    assert session.transcript == "User: hi\nAgent: hello\nUser: bye\n"


@pytest.mark.asyncio
async def test_log_worthy_events_are_logged(bridge, relay_logs):
    await bridge.handle_realtime_message(json.dumps({"type": "input_audio_buffer.speech_started"}))
    await bridge.handle_realtime_message(json.dumps({"type": "response.audio_transcript.delta"}))

    assert "Received event: input_audio_buffer.speech_started" in relay_logs.text
    assert "response.audio_transcript.delta" not in relay_logs.text


@pytest.mark.asyncio
async def test_start_opens_link_and_sends_session_update(bridge, mock_client):
    async def slow_listen(on_message):
        await asyncio.sleep(0.05)

    mock_client.listen.side_effect = slow_listen

    link_task = bridge.start()
    await asyncio.sleep(0.02)

    mock_client.connect.assert_called_once()
    assert bridge.state is BridgeState.ACTIVE
    events = sent_events(mock_client)
    assert len(events) == 1
    update = events[0]
    assert update["type"] == "session.update"
    assert update["session"] == {
        "turn_detection": {"type": "server_vad"},
        "input_audio_format": "g711_ulaw",
        "output_audio_format": "g711_ulaw",
        "voice": "alloy",
        "instructions": update["session"]["instructions"],
        "modalities": ["text", "audio"],
        "temperature": 0.8,
        "input_audio_transcription": {"model": "whisper-1"},
    }
    assert update["session"]["instructions"]

    await link_task


@pytest.mark.asyncio
async def test_failed_connect_sends_nothing(bridge, mock_client):
    mock_client.connect.return_value = False

    await bridge.start()

    mock_client.listen.assert_not_called()
    mock_client.send_event.assert_not_called()
    assert bridge.state is BridgeState.CONNECTING


@pytest.mark.asyncio
async def test_close_cancels_link_and_closes_client(bridge, mock_client):
    async def endless_listen(on_message):
        await asyncio.sleep(10)

    mock_client.listen.side_effect = endless_listen

    link_task = bridge.start()
    await asyncio.sleep(0)
    await bridge.close()

    mock_client.close.assert_called_once()
    assert link_task.done()
    assert bridge.state is BridgeState.CLOSED

    # Closing twice is harmless
    await bridge.close()
    mock_client.close.assert_called_once()


@pytest.mark.asyncio
async def test_audio_delta_without_delta_is_logged(bridge, telephony_ws, relay_logs):
    await bridge.handle_realtime_message(json.dumps({"type": "response.audio.delta", "item_id": "i1"}))

    assert telephony_ws.sent_messages == []
    assert "Error processing OpenAI message" in relay_logs.text
