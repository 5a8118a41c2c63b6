"""
Handles the inbound call webhook and call identification.

Twilio requests ``/incoming-call`` when a call arrives. The reply is TwiML that
greets the caller and tells Twilio to open a bidirectional media stream back to
this server's ``/media-stream`` socket.
"""

import time
from typing import Mapping
from xml.sax.saxutils import escape, quoteattr

from call_relay.config.constants import CALL_SID_HEADER, GREETING

MEDIA_STREAM_PATH = "/media-stream"


def build_stream_twiml(host: str, greeting: str = GREETING) -> str:
    """
    Build the TwiML answering an incoming call.

    Args:
        host: Host header of the webhook request, used as the stream target
        greeting: Text spoken to the caller before the stream connects

    Returns:
        The TwiML document as a string
    """
    stream_url = quoteattr(f"wss://{host}{MEDIA_STREAM_PATH}")
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<Response>
    <Say>{escape(greeting)}</Say>
    <Connect>
        <Stream url={stream_url} />
    </Connect>
</Response>"""


def resolve_call_id(headers: Mapping[str, str]) -> str:
    """
    Pick the identifier for a new media stream connection.

    Uses the Twilio call SID header when present, otherwise a timestamp-based id.

    Args:
        headers: Headers of the WebSocket upgrade request

    Returns:
        The call id
    """
    call_sid = headers.get(CALL_SID_HEADER)
    if call_sid:
        return call_sid
    return f"session_{int(time.time() * 1000)}"
