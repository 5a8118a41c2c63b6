"""
Call Relay - Twilio Media Streams to OpenAI Realtime API Bridge

This application answers phone calls through Twilio, relays the caller's audio to
OpenAI's Realtime API, streams the spoken replies back to the caller, and after the
call extracts customer details from the transcript and posts them to an automation
webhook.

Architecture Overview:
- FastAPI server exposing the Twilio voice webhook and the media stream socket
- One OpenAI Realtime connection per call, configured once when it opens
- Transcript accumulated from Realtime transcription and response events
- Post-call structured extraction with the Chat Completions API

Key Components:
- bot: Realtime API client and the per-call Twilio/Realtime bridge
- config: Constants, environment settings and logging setup
- handlers: Handlers for Twilio stream events, Realtime events and the call webhook
- models: Call session state and pydantic message schemas
- services: Post-call extraction and webhook delivery
- websocket_manager: Accepts media streams and runs each call's lifecycle

Getting Started:
1. Set up environment variables (or a .env file):
   - OPENAI_API_KEY: Your OpenAI API key (required)
   - PORT: Port to run the server on (default 5050)
   - WEBHOOK_URL: Where extracted customer details are posted

2. Start the server:
   ```bash
   python run.py
   ```

3. Point your Twilio number's voice webhook at https://your-host/incoming-call
"""
