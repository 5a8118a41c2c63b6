"""
WebSocket connection manager for the Twilio media stream endpoint.

This module implements the server side of a call's lifetime:
- Accept the media stream socket and resolve the call id
- Create the call session and the per-call Realtime bridge
- Feed every caller message to the bridge until the caller hangs up
- Tear down: close the Realtime link, run post-call extraction, drop the session

The MediaStreamManager owns the SessionStore, so the registry of live calls
lives exactly as long as the server that created it.
"""

import asyncio
import logging
from typing import Optional

from fastapi import WebSocket, WebSocketDisconnect

from call_relay.bot.realtime_api import RealtimeClient
from call_relay.bot.twilio_realtime_bridge import TwilioRealtimeBridge
from call_relay.config import settings
from call_relay.config.constants import LOGGER_NAME
from call_relay.handlers.call_handlers import resolve_call_id
from call_relay.models.session import SessionStore
from call_relay.services.post_call import process_transcript_and_send

logger = logging.getLogger(LOGGER_NAME)


class MediaStreamManager:
    """Manages media stream connections and the lifecycle of each call.

    Each accepted socket gets its own CallSession and TwilioRealtimeBridge. The
    session is removed from the store exactly once, after post-call processing
    has finished or has been abandoned past ``post_call_timeout``.
    """

    def __init__(self, post_call_timeout: Optional[float] = None):
        self.session_store = SessionStore()
        self.post_call_timeout = post_call_timeout or settings.POST_CALL_TIMEOUT

    def create_client(self) -> RealtimeClient:
        """Create the Realtime client for a new call."""
        return RealtimeClient(settings.OPENAI_API_KEY, settings.REALTIME_MODEL)

    async def handle_websocket(self, websocket: WebSocket):
        """Handle a media stream connection throughout its lifecycle.

        Args:
            websocket (WebSocket): The FastAPI WebSocket connection object

        The connection remains open until Twilio closes it when the caller hangs up.
        """
        await websocket.accept()
        logger.info("Client connected")

        call_id = resolve_call_id(websocket.headers)
        session = self.session_store.get_or_create_session(call_id)
        bridge = TwilioRealtimeBridge(call_id, session, websocket, self.create_client())
        bridge.start()

        try:
            while True:
                data = await websocket.receive_text()
                await bridge.handle_telephony_message(data)
        except WebSocketDisconnect:
            logger.info(f"Client disconnected ({call_id}).")
        except Exception as e:
            logger.error(f"Error in media stream connection for call {call_id}: {e}", exc_info=True)
        finally:
            await self._finish_call(call_id, bridge)

    async def _finish_call(self, call_id: str, bridge: TwilioRealtimeBridge) -> None:
        """Close the bridge, run post-call extraction and remove the session."""
        try:
            await bridge.close()
            logger.info(f"Full Transcript ({call_id}):\n{bridge.session.transcript}")
            await asyncio.wait_for(
                process_transcript_and_send(bridge.session.transcript, call_id),
                timeout=self.post_call_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Post-call processing for call {call_id} abandoned after {self.post_call_timeout}s"
            )
        except Exception as e:
            logger.error(f"Error in post-call processing for call {call_id}: {e}", exc_info=True)
        finally:
            self.session_store.remove_session(call_id)
            logger.info(f"Session removed for call: {call_id}")
