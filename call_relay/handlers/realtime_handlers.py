"""
Handles events received from the OpenAI Realtime API for one call.

Audio deltas are forwarded to the caller as Twilio ``media`` frames. Caller
transcriptions and completed agent responses are appended to the call's
transcript in the order they arrive.
"""

import base64
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import ValidationError

from call_relay.config.constants import AGENT_MESSAGE_PLACEHOLDER, LOGGER_NAME
from call_relay.models.openai_schemas import (
    RealtimeErrorEvent,
    ResponseAudioDeltaEvent,
    ResponseBody,
    ResponseDoneEvent,
    TranscriptionCompletedEvent,
)
from call_relay.models.twilio_schemas import OutgoingMediaMessage, OutgoingMediaPayload

if TYPE_CHECKING:
    from call_relay.bot.twilio_realtime_bridge import TwilioRealtimeBridge

logger = logging.getLogger(LOGGER_NAME)


async def handle_audio_delta(event: Dict[str, Any], bridge: "TwilioRealtimeBridge") -> None:
    """
    Forward a chunk of agent audio to the caller.

    Args:
        event: The decoded response.audio.delta event
        bridge: The bridge for the call the event belongs to

    Raises:
        ValidationError: If the event has no delta field
        binascii.Error: If the delta is not valid base64
    """
    audio_delta = ResponseAudioDeltaEvent(**event)
    if not audio_delta.delta:
        return

    payload = base64.b64encode(base64.b64decode(audio_delta.delta)).decode("utf-8")
    audio_message = OutgoingMediaMessage(
        streamSid=bridge.session.stream_sid,
        media=OutgoingMediaPayload(payload=payload),
    )
    await bridge.telephony_ws.send_text(audio_message.model_dump_json())


async def handle_transcription_completed(event: Dict[str, Any], bridge: "TwilioRealtimeBridge") -> None:
    """
    Append a transcribed caller utterance to the transcript.

    Args:
        event: The decoded transcription completed event
        bridge: The bridge for the call the event belongs to
    """
    try:
        transcription = TranscriptionCompletedEvent(**event)
    except ValidationError as e:
        logger.error(f"Invalid transcription event: {e} Event: {event}")
        return

    user_message = transcription.transcript.strip()
    bridge.session.append_user_line(user_message)
    logger.info(f"User ({bridge.call_id}): {user_message}")


def extract_agent_transcript(response: ResponseBody) -> Optional[str]:
    """
    Return the transcript of the first output item's first transcript-bearing part.

    Args:
        response: The response object of a response.done event

    Returns:
        The transcript text, or None if the response has none
    """
    if not response.output:
        return None
    for part in response.output[0].content:
        if part.transcript:
            return part.transcript
    return None


async def handle_response_done(event: Dict[str, Any], bridge: "TwilioRealtimeBridge") -> None:
    """
    Append the agent's completed response to the transcript.

    Args:
        event: The decoded response.done event
        bridge: The bridge for the call the event belongs to
    """
    try:
        response_done = ResponseDoneEvent(**event)
        agent_message = extract_agent_transcript(response_done.response)
    except ValidationError as e:
        logger.warning(f"Unexpected response.done structure: {e}")
        agent_message = None

    if agent_message is None:
        agent_message = AGENT_MESSAGE_PLACEHOLDER

    bridge.session.append_agent_line(agent_message)
    logger.info(f"Agent ({bridge.call_id}): {agent_message}")


async def handle_session_updated(event: Dict[str, Any], bridge: "TwilioRealtimeBridge") -> None:
    logger.info(f"Session updated successfully for call {bridge.call_id}: {event}")


async def handle_error(event: Dict[str, Any], bridge: "TwilioRealtimeBridge") -> None:
    error_event = RealtimeErrorEvent(**event)
    logger.error(f"Received error from OpenAI for call {bridge.call_id}: {error_event.error}")
