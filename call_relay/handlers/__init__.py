"""
Handlers module for the two sides of the call relay.

Key components:
- call_handlers: Builds the TwiML answering an incoming call and resolves the
  call id for a new media stream connection.
- stream_handlers: Processes Twilio media stream events (start, media, others)
  for one call's bridge.
- realtime_handlers: Processes OpenAI Realtime events (audio deltas, caller
  transcriptions, completed responses) for one call's bridge, including the
  transcript bookkeeping.

Every stream and realtime handler has the same shape: it takes the decoded
event dict and the TwilioRealtimeBridge of the call, and returns nothing.

Usage examples:
```python
from call_relay.handlers.call_handlers import build_stream_twiml

twiml = build_stream_twiml(request.headers["host"])
```
"""
