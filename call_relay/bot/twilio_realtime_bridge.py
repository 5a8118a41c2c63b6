"""
Bridge module for connecting the Twilio media stream protocol with OpenAI Realtime API.

One TwilioRealtimeBridge exists per call. It owns the call's Realtime link and
forwards messages in both directions:
- Caller to Realtime: Twilio events are decoded and dispatched by ``event``.
- Realtime to caller: Realtime events are decoded and dispatched by ``type``.

A message that fails to decode or validate is logged with its raw text and
dropped; the relay keeps running.
"""

import asyncio
import binascii
import json
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import WebSocket
from pydantic import ValidationError

from call_relay.bot.realtime_api import RealtimeClient
from call_relay.config.constants import (
    EVENT_ERROR,
    EVENT_RESPONSE_AUDIO_DELTA,
    EVENT_RESPONSE_DONE,
    EVENT_SESSION_UPDATED,
    EVENT_TRANSCRIPTION_COMPLETED,
    LOG_EVENT_TYPES,
    LOGGER_NAME,
    SESSION_UPDATE_DELAY,
    TWILIO_EVENT_MEDIA,
    TWILIO_EVENT_START,
)
from call_relay.handlers.realtime_handlers import (
    handle_audio_delta,
    handle_error,
    handle_response_done,
    handle_session_updated,
    handle_transcription_completed,
)
from call_relay.handlers.stream_handlers import (
    handle_media,
    handle_other_event,
    handle_stream_start,
)
from call_relay.models.openai_schemas import SessionUpdateEvent
from call_relay.models.session import CallSession

logger = logging.getLogger(LOGGER_NAME)

HandlerFunc = Callable[[Dict[str, Any], "TwilioRealtimeBridge"], Awaitable[None]]


class BridgeState(str, Enum):
    """Lifecycle of one call's bridge."""
    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"


class TwilioRealtimeBridge:
    """
    Bridge between one Twilio media stream and one OpenAI Realtime connection.

    This class handles:
    - Opening the Realtime link in the background and configuring its session
    - Forwarding caller audio to the Realtime API
    - Forwarding agent audio back to the caller
    - Accumulating the call transcript on the session
    """

    def __init__(
        self,
        call_id: str,
        session: CallSession,
        telephony_ws: WebSocket,
        client: RealtimeClient,
        session_update_delay: float = SESSION_UPDATE_DELAY,
    ):
        self.call_id = call_id
        self.session = session
        self.telephony_ws = telephony_ws
        self.client = client
        self.session_update_delay = session_update_delay
        self.state = BridgeState.CONNECTING
        self._link_task: Optional[asyncio.Task] = None
        self._session_update_task: Optional[asyncio.Task] = None

        self.telephony_handlers: Dict[str, HandlerFunc] = {
            TWILIO_EVENT_START: handle_stream_start,
            TWILIO_EVENT_MEDIA: handle_media,
        }
        self.realtime_handlers: Dict[str, HandlerFunc] = {
            EVENT_RESPONSE_AUDIO_DELTA: handle_audio_delta,
            EVENT_TRANSCRIPTION_COMPLETED: handle_transcription_completed,
            EVENT_RESPONSE_DONE: handle_response_done,
            EVENT_SESSION_UPDATED: handle_session_updated,
            EVENT_ERROR: handle_error,
        }

    def start(self) -> asyncio.Task:
        """
        Open the Realtime link in the background.

        Caller messages can be handled right away; media frames that arrive
        before the link is open are dropped.

        Returns:
            The task running the link for the lifetime of the call
        """
        self.state = BridgeState.CONNECTING
        self._link_task = asyncio.create_task(self._run_realtime_link())
        return self._link_task

    async def _run_realtime_link(self) -> None:
        """Connect, schedule the session update, then pump Realtime events until the link ends."""
        if not await self.client.connect():
            logger.error(f"Could not open Realtime link for call: {self.call_id}")
            return

        if self.state is BridgeState.CONNECTING:
            self.state = BridgeState.ACTIVE
        self._session_update_task = asyncio.create_task(self._send_session_update())
        await self.client.listen(self.handle_realtime_message)

    async def _send_session_update(self) -> None:
        """Send the one-time session configuration shortly after the link opens."""
        await asyncio.sleep(self.session_update_delay)
        session_update = SessionUpdateEvent()
        logger.info(f"Sending session update for call {self.call_id}: {session_update.model_dump_json()}")
        await self.client.send_event(session_update)

    async def handle_telephony_message(self, raw_message: str) -> None:
        """
        Decode and dispatch one message from the caller's media stream.

        Args:
            raw_message: The text frame received from Twilio
        """
        try:
            message = json.loads(raw_message)
            handler = self.telephony_handlers.get(message.get("event"), handle_other_event)
            await handler(message, self)
        except (json.JSONDecodeError, AttributeError, ValidationError) as e:
            logger.error(f"Error parsing message: {e} Message: {raw_message}")
        except Exception as e:
            logger.error(f"Error handling Twilio message: {e} Message: {raw_message}", exc_info=True)

    async def handle_realtime_message(self, raw_message: str) -> None:
        """
        Decode and dispatch one message from the Realtime API.

        Args:
            raw_message: The text frame received from OpenAI
        """
        try:
            event = json.loads(raw_message)
            event_type = event.get("type")

            if event_type in LOG_EVENT_TYPES:
                logger.info(f"Received event: {event_type} {event}")

            handler = self.realtime_handlers.get(event_type)
            if handler:
                await handler(event, self)
        except (json.JSONDecodeError, AttributeError, ValidationError, binascii.Error) as e:
            logger.error(f"Error processing OpenAI message: {e} Raw message: {raw_message}")
        except Exception as e:
            logger.error(f"Error handling OpenAI message: {e} Raw message: {raw_message}", exc_info=True)

    async def close(self) -> None:
        """
        Close the Realtime link and stop the background tasks.
        """
        if self.state is BridgeState.CLOSED:
            return
        self.state = BridgeState.CLOSING

        if self._session_update_task and not self._session_update_task.done():
            self._session_update_task.cancel()

        await self.client.close()

        if self._link_task and not self._link_task.done():
            self._link_task.cancel()
            try:
                await self._link_task
            except asyncio.CancelledError:
                pass
        elif self._link_task and not self._link_task.cancelled() and self._link_task.exception():
            logger.error(f"Realtime link for call {self.call_id} ended with error: {self._link_task.exception()}")

        self.state = BridgeState.CLOSED
        logger.info(f"Bridge closed for call: {self.call_id}")
