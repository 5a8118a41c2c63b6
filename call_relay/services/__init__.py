"""
Services module for the outbound HTTP integrations of the call relay.

Key components:
- post_call: Sends a finished call's transcript to the OpenAI Chat Completions
  API with a strict JSON schema (customer name, availability, special notes) and
  forwards the parsed result to the automation webhook. HTTP calls use requests
  in a worker thread so the event loop keeps serving other calls.

Usage examples:
```python
from call_relay.services.post_call import process_transcript_and_send

sent = await process_transcript_and_send("User: hi\\nAgent: hello\\n", call_id="CA123")
```
"""
