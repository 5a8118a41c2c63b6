"""
Bot module for relaying Twilio phone calls through the OpenAI Realtime API.

Key components:
- RealtimeClient: One call's WebSocket connection to the OpenAI Realtime API. It
  sends JSON events while the link is open, drops them otherwise, and hands every
  received message to a callback. It never reconnects.
- TwilioRealtimeBridge: Per-call bridge that opens the Realtime link, sends the
  one-time session configuration, and forwards audio between the caller's media
  stream and the Realtime API while filling in the call transcript.

Usage examples:
```python
from call_relay.bot import RealtimeClient, TwilioRealtimeBridge
from call_relay.models.session import CallSession

session = CallSession(call_id="CA123")
bridge = TwilioRealtimeBridge("CA123", session, websocket, RealtimeClient(api_key))
bridge.start()

async for text in websocket.iter_text():
    await bridge.handle_telephony_message(text)

await bridge.close()
print(session.transcript)
```
"""

from call_relay.bot.realtime_api import RealtimeClient
from call_relay.bot.twilio_realtime_bridge import BridgeState, TwilioRealtimeBridge

__all__ = ["RealtimeClient", "TwilioRealtimeBridge", "BridgeState"]
