"""
Handles caller-side events from the Twilio media stream.

Each function processes one Twilio event type for a single call's bridge: the
``start`` event records the stream identifier, ``media`` events forward caller
audio to the Realtime API, and everything else is logged and discarded.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict

from pydantic import ValidationError

from call_relay.config.constants import LOGGER_NAME
from call_relay.models.openai_schemas import InputAudioBufferAppendEvent
from call_relay.models.twilio_schemas import StreamStartMessage

if TYPE_CHECKING:
    from call_relay.bot.twilio_realtime_bridge import TwilioRealtimeBridge

logger = logging.getLogger(LOGGER_NAME)


async def handle_stream_start(message: Dict[str, Any], bridge: "TwilioRealtimeBridge") -> None:
    """
    Handle the ``start`` event that opens a Twilio media stream.

    The stream identifier is stored on the call session so that agent audio can
    be addressed to this stream.

    Args:
        message: The decoded start event
        bridge: The bridge for the call the event belongs to
    """
    try:
        start_message = StreamStartMessage(**message)
    except ValidationError as e:
        logger.error(f"Invalid start event: {e} Message: {message}")
        return

    stream_sid = start_message.start.streamSid
    if bridge.session.set_stream_sid(stream_sid):
        logger.info(f"Incoming stream has started {stream_sid} for call: {bridge.call_id}")


async def handle_media(message: Dict[str, Any], bridge: "TwilioRealtimeBridge") -> None:
    """
    Handle a ``media`` event carrying caller audio.

    The payload is forwarded unchanged as an ``input_audio_buffer.append`` event.
    Frames that arrive while the Realtime link is not open are dropped.

    Args:
        message: The decoded media event
        bridge: The bridge for the call the event belongs to
    """
    # Fast path - minimal validation for speed
    payload = (message.get("media") or {}).get("payload")
    if not payload:
        logger.warning(f"Missing audio payload in media event for call: {bridge.call_id}")
        return

    if not bridge.client.is_open:
        logger.debug(f"Realtime link not open, dropping audio frame for call: {bridge.call_id}")
        return

    await bridge.client.send_event(InputAudioBufferAppendEvent(audio=payload))


async def handle_other_event(message: Dict[str, Any], bridge: "TwilioRealtimeBridge") -> None:
    """Log and discard any event the relay does not act on."""
    logger.info(f"Received non-media event: {message.get('event')} for call: {bridge.call_id}")
