"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the application,
providing a centralized location for configuration values and making it easier to
maintain consistent naming throughout the codebase.
"""

# Logger name used throughout the application
LOGGER_NAME = "call_relay"

# OpenAI endpoints and default models
REALTIME_API_URL = "wss://api.openai.com/v1/realtime"
CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_REALTIME_MODEL = "gpt-4o-realtime-preview-2024-10-01"
DEFAULT_EXTRACTION_MODEL = "gpt-4o-2024-08-06"
DEFAULT_WEBHOOK_URL = "https://hook.us2.make.com/hh9edyw1fblx9gibhh8dt7cncbmq9hs0"

# Realtime session settings
VOICE = "alloy"
AUDIO_FORMAT_G711_ULAW = "g711_ulaw"
TRANSCRIPTION_MODEL = "whisper-1"
TEMPERATURE = 0.8
MODALITIES = ["text", "audio"]
SESSION_UPDATE_DELAY = 0.25  # seconds after the link opens

SYSTEM_MESSAGE = (
    "You are an AI phone agent for Divergent Digital Studio. Your task is to engage "
    "politely with customers calling our digital agency. Follow these steps: "
    "Greet the caller warmly and introduce yourself as an AI assistant for Divergent "
    "Digital Studio. Ask for and confirm the caller's name. Inquire about the specific "
    "digital services they're interested in. Ask about their preferred time for a "
    "follow-up call. Guide them to our website www.thedds.com.au, emphasizing the "
    "comprehensive information available about our services. Strongly encourage them "
    "to fill out and submit the service request form on our website. Explain that this "
    "form is crucial for understanding their needs and providing a tailored response. "
    "Assure them that our team will promptly review their form and contact them at "
    "their preferred time to discuss their project in detail. Throughout the call, "
    "maintain a friendly and professional tone. Ask one question at a time and listen "
    "attentively to their responses. Do not request additional contact information "
    "beyond what they voluntarily provide. Conclude the call by reiterating the "
    "importance of visiting our website and submitting the form for the best possible "
    "service. Thank them for their interest in Divergent Digital Studio and express "
    "enthusiasm about potentially working with them. Remember to adapt your language "
    "and pace to the caller's style, ensuring a positive and helpful interaction "
    "throughout the call."
)

GREETING = (
    "Hi, you have called Divergent Digital Studio. How can we help? "
    "you can speek with your language preference!"
)

# Post-call extraction
EXTRACTION_SYSTEM_PROMPT = (
    "Extract customer details: name, availability, and any special notes from the transcript."
)
EXTRACTION_SCHEMA_NAME = "customer_details_extraction"
AGENT_MESSAGE_PLACEHOLDER = "Agent message not found"

# Call id header set on the media stream upgrade request
CALL_SID_HEADER = "x-twilio-call-sid"

# Twilio Media Streams event constants
TWILIO_EVENT_START = "start"
TWILIO_EVENT_MEDIA = "media"

# OpenAI Realtime event constants
EVENT_SESSION_UPDATED = "session.updated"
EVENT_RESPONSE_AUDIO_DELTA = "response.audio.delta"
EVENT_RESPONSE_DONE = "response.done"
EVENT_TRANSCRIPTION_COMPLETED = "conversation.item.input_audio_transcription.completed"
EVENT_ERROR = "error"

# Realtime events logged verbatim for observability
LOG_EVENT_TYPES = frozenset(
    [
        "response.content.done",
        "rate_limits.updated",
        "response.done",
        "input_audio_buffer.committed",
        "input_audio_buffer.speech_stopped",
        "input_audio_buffer.speech_started",
        "session.created",
        "response.text.done",
        "conversation.item.input_audio_transcription.completed",
    ]
)
