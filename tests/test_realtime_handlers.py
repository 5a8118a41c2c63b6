import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from call_relay.handlers.realtime_handlers import (
    extract_agent_transcript,
    handle_audio_delta,
    handle_error,
    handle_response_done,
    handle_transcription_completed,
)
from call_relay.models.openai_schemas import ResponseBody
from call_relay.models.session import CallSession


@pytest.fixture
def bridge():
    bridge = MagicMock()
    bridge.call_id = "CA123"
    bridge.session = CallSession(call_id="CA123")
    bridge.telephony_ws = AsyncMock()
    return bridge


def response_done(output):
    return {"type": "response.done", "response": {"id": "resp_1", "output": output}}


@pytest.mark.asyncio
class TestRealtimeHandlers:

    async def test_handle_audio_delta(self, bridge):
        bridge.session.set_stream_sid("SID1")

        await handle_audio_delta({"type": "response.audio.delta", "delta": "AAEC"}, bridge)

        sent = json.loads(bridge.telephony_ws.send_text.call_args.args[0])
        assert sent == {"event": "media", "streamSid": "SID1", "media": {"payload": "AAEC"}}

    async def test_handle_audio_delta_before_start(self, bridge):
        await handle_audio_delta({"type": "response.audio.delta", "delta": "QQ=="}, bridge)

        sent = json.loads(bridge.telephony_ws.send_text.call_args.args[0])
        assert sent["streamSid"] is None

    async def test_handle_audio_delta_without_delta_field(self, bridge):
        with pytest.raises(ValidationError):
            await handle_audio_delta({"type": "response.audio.delta"}, bridge)

        bridge.telephony_ws.send_text.assert_not_called()

    async def test_handle_error_logs_error_body(self, bridge, relay_logs):
        event = {
            "type": "error",
            "event_id": "evt_9",
            "error": {"type": "invalid_request_error", "message": "Unknown event"},
        }

        await handle_error(event, bridge)

        assert "Received error from OpenAI for call CA123" in relay_logs.text
        assert "Unknown event" in relay_logs.text
        assert "evt_9" not in relay_logs.text

    async def test_handle_transcription_completed_trims(self, bridge):
        event = {
            "type": "conversation.item.input_audio_transcription.completed",
            "item_id": "item_1",
            "transcript": "  I'd like a website.\n",
        }

        await handle_transcription_completed(event, bridge)

        assert bridge.session.transcript == "User: I'd like a website.\n"

    async def test_handle_transcription_completed_invalid(self, bridge):
        event = {"type": "conversation.item.input_audio_transcription.completed"}

        await handle_transcription_completed(event, bridge)

        assert bridge.session.transcript == ""

    async def test_handle_response_done(self, bridge):
        event = response_done([
            {"content": [{"type": "audio", "transcript": "Hello, how can I help?"}]}
        ])

        await handle_response_done(event, bridge)

        assert bridge.session.transcript == "Agent: Hello, how can I help?\n"

    async def test_handle_response_done_without_transcript(self, bridge):
        await handle_response_done(response_done([{"content": [{"type": "text", "text": "hi"}]}]), bridge)
        await handle_response_done(response_done([]), bridge)

        assert bridge.session.transcript == (
            "Agent: Agent message not found\nAgent: Agent message not found\n"
        )

    async def test_handle_response_done_malformed(self, bridge):
        await handle_response_done({"type": "response.done"}, bridge)

        assert bridge.session.transcript == "Agent: Agent message not found\n"


def test_extract_agent_transcript_takes_first_transcript():
    response = ResponseBody(output=[
        {"content": [{"type": "text"}, {"transcript": "first"}, {"transcript": "second"}]},
        {"content": [{"transcript": "other item"}]},
    ])
    assert extract_agent_transcript(response) == "first"


def test_extract_agent_transcript_only_reads_first_output_item():
    response = ResponseBody(output=[
        {"content": []},
        {"content": [{"transcript": "other item"}]},
    ])
    assert extract_agent_transcript(response) is None
