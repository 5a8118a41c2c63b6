"""
FastAPI server relaying Twilio phone calls through the OpenAI Realtime API.

This module initializes and configures the FastAPI application:
- ``/incoming-call`` answers Twilio's voice webhook with TwiML that opens a media stream
- ``/media-stream`` is the bidirectional media stream socket for each call
- ``/`` and ``/health`` report server status
"""

from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import Response

from call_relay.config import settings
from call_relay.config.logging_config import configure_logging
from call_relay.handlers.call_handlers import build_stream_twiml
from call_relay.websocket_manager import MediaStreamManager

# Configure logging
logger = configure_logging()

# Create FastAPI application
app = FastAPI(
    title="Call Relay",
    description="Relay between Twilio Media Streams and the OpenAI Realtime API",
    version="1.0.0",
)

# Create media stream manager
media_stream_manager = MediaStreamManager()


@app.get("/")
async def root():
    """Root endpoint confirming the server is up."""
    return {"message": "Twilio Media Stream Server is running!"}


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring system status.

    Returns:
        dict: Status information including the number of calls in progress.
    """
    return {
        "status": "healthy",
        "openai_api_key_configured": bool(settings.OPENAI_API_KEY),
        "active_calls": len(media_stream_manager.session_store),
    }


@app.api_route("/incoming-call", methods=["GET", "POST"])
async def incoming_call(request: Request):
    """Answer Twilio's incoming call webhook.

    The TwiML greets the caller and connects a media stream to this server's
    ``/media-stream`` socket on the host Twilio used to reach us.
    """
    logger.info("Incoming call")
    host = request.headers.get("host", "")
    return Response(content=build_stream_twiml(host), media_type="text/xml")


@app.websocket("/media-stream")
async def media_stream(websocket: WebSocket):
    """WebSocket endpoint for Twilio Media Streams.

    Audio flows in both directions for the duration of the call; post-call
    extraction runs when the socket closes.
    """
    await media_stream_manager.handle_websocket(websocket)

