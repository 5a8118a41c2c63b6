import asyncio
import json
import logging
import time
import traceback
from typing import Any, Awaitable, Callable, Dict, Union

import websockets
from pydantic import BaseModel
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, ConnectionClosedOK

from call_relay.config.constants import DEFAULT_REALTIME_MODEL, LOGGER_NAME, REALTIME_API_URL

logger = logging.getLogger(LOGGER_NAME)

CONNECTION_TIMEOUT = 30  # seconds

# WebSocket configuration for low latency
WS_MAX_SIZE = 16 * 1024 * 1024  # 16MB - large enough for audio chunks
WS_MAX_QUEUE = 32
WS_PING_INTERVAL = 20

MessageHandler = Callable[[str], Awaitable[None]]


class RealtimeClient:
    """
    Client for one call's connection to the OpenAI Realtime API.

    The client is opened once and never reconnected: when the link drops, the
    call simply stops receiving agent audio.
    """
    def __init__(self, api_key: str, model: str = DEFAULT_REALTIME_MODEL, url: str = REALTIME_API_URL):
        self.api_key = api_key
        self.model = model
        self.url = url
        self.ws = None
        self._connection_active = False
        self._is_closing = False
        logger.info(f"RealtimeClient initialized with model: {model}")

    @property
    def is_open(self) -> bool:
        """True while the link is connected and usable for sending."""
        return self.ws is not None and self._connection_active and not self._is_closing

    async def connect(self) -> bool:
        """
        Connect to the OpenAI Realtime WebSocket endpoint.

        Returns:
            bool: True if connection was successful, False otherwise
        """
        if self._is_closing:
            logger.warning("Cannot connect - client is closing")
            return False

        url = f"{self.url}?model={self.model}"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "OpenAI-Beta": "realtime=v1",
        }

        try:
            logger.info(f"Connecting to OpenAI Realtime API with model: {self.model}")
            logger.debug(f"WebSocket URL: {url}")

            connection_start = time.time()
            self.ws = await asyncio.wait_for(
                websockets.connect(
                    url,
                    max_size=WS_MAX_SIZE,
                    max_queue=WS_MAX_QUEUE,
                    ping_interval=WS_PING_INTERVAL,
                    compression=None,
                    additional_headers=headers
                ),
                timeout=CONNECTION_TIMEOUT
            )
            connection_time = time.time() - connection_start
            logger.debug(f"WebSocket connection established in {connection_time:.2f} seconds")

            self._connection_active = True
            logger.info("Connected to the OpenAI Realtime API")
            return True
        except asyncio.TimeoutError:
            logger.error(f"Timeout while connecting to OpenAI Realtime API (after {CONNECTION_TIMEOUT}s)")
            self._connection_active = False
            return False
        except Exception as e:
            logger.error(f"Failed to connect to OpenAI Realtime API: {e}")
            logger.debug(f"Connection error details: {traceback.format_exc()}")
            self._connection_active = False
            return False

    async def send_event(self, event: Union[BaseModel, Dict[str, Any]]) -> bool:
        """
        Send one JSON event to the Realtime API.

        Events sent while the link is not open are dropped.

        Args:
            event: A pydantic event model or a plain dict

        Returns:
            bool: True if the event was sent, False if it was dropped or failed
        """
        if not self.is_open:
            logger.debug("Realtime link not open, dropping outgoing event")
            return False

        if isinstance(event, BaseModel):
            message = event.model_dump_json()
        else:
            message = json.dumps(event)

        try:
            await self.ws.send(message)
            return True
        except ConnectionClosed as e:
            logger.warning(f"Connection closed while sending event: {e}")
            self._connection_active = False
            return False
        except Exception as e:
            logger.error(f"Error sending event to OpenAI: {e}")
            logger.debug(f"Send error details: {traceback.format_exc()}")
            return False

    async def listen(self, on_message: MessageHandler) -> None:
        """
        Receive messages until the link closes, handing each to ``on_message``.

        Args:
            on_message: Coroutine called with each raw text message
        """
        if not self.ws:
            logger.error("WebSocket not initialized for receive loop")
            self._connection_active = False
            return

        try:
            logger.debug("Receive loop started")
            async for message in self.ws:
                if isinstance(message, bytes):
                    message = message.decode("utf-8", errors="replace")
                await on_message(message)
        except ConnectionClosedOK:
            logger.info("OpenAI WebSocket connection closed normally")
        except ConnectionClosedError as e:
            logger.error(f"Error in the OpenAI WebSocket: {e}")
        finally:
            self._connection_active = False
            logger.info("Disconnected from the OpenAI Realtime API")

    async def close(self) -> None:
        """
        Close the WebSocket connection.
        """
        logger.info("Closing OpenAI Realtime client")
        self._is_closing = True
        self._connection_active = False

        if self.ws:
            try:
                await self.ws.close()
            except Exception as e:
                logger.warning(f"Error closing OpenAI WebSocket: {e}")

        logger.info("OpenAI Realtime client closed")
