"""
Models module for data structures and state management in the call relay.

Key components:
- session: CallSession (stream id and transcript for one call) and SessionStore,
  the registry of live sessions keyed by call id.
- twilio_schemas: Pydantic models for the Twilio Media Streams socket protocol
  (the start event and outgoing media frames).
- openai_schemas: Pydantic models for the OpenAI Realtime events the relay sends
  and consumes, plus the customer-details extraction contract.

Usage examples:
```python
from call_relay.models.session import SessionStore

store = SessionStore()
session = store.get_or_create_session("CA123")
session.set_stream_sid("MZ456")
session.append_user_line("hi")

from call_relay.models.twilio_schemas import OutgoingMediaMessage

frame = OutgoingMediaMessage(streamSid=session.stream_sid, media={"payload": "QQ=="})
await websocket.send_text(frame.model_dump_json())
```
"""
