"""
Pydantic models for OpenAI Realtime API and Chat Completions message structures.

This module provides type-safe models for the messages exchanged with the OpenAI Realtime API,
including both incoming and outgoing message formats, and the structured-extraction
contract used after a call ends.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from call_relay.config.constants import (
    AUDIO_FORMAT_G711_ULAW,
    MODALITIES,
    SYSTEM_MESSAGE,
    TEMPERATURE,
    TRANSCRIPTION_MODEL,
    VOICE,
)


class TurnDetection(BaseModel):
    """Turn detection settings for the Realtime session."""
    type: str = "server_vad"


class InputAudioTranscription(BaseModel):
    """Transcription sub-model applied to caller audio."""
    model: str = TRANSCRIPTION_MODEL


class SessionConfig(BaseModel):
    """Session settings sent once when the Realtime link opens."""
    turn_detection: TurnDetection = Field(default_factory=TurnDetection)
    input_audio_format: str = AUDIO_FORMAT_G711_ULAW
    output_audio_format: str = AUDIO_FORMAT_G711_ULAW
    voice: str = VOICE
    instructions: str = SYSTEM_MESSAGE
    modalities: List[str] = Field(default_factory=lambda: list(MODALITIES))
    temperature: float = TEMPERATURE
    input_audio_transcription: InputAudioTranscription = Field(
        default_factory=InputAudioTranscription
    )


class SessionUpdateEvent(BaseModel):
    """Outgoing session.update event."""
    type: Literal["session.update"] = "session.update"
    session: SessionConfig = Field(default_factory=SessionConfig)


class InputAudioBufferAppendEvent(BaseModel):
    """Outgoing event appending caller audio to the input buffer."""
    type: Literal["input_audio_buffer.append"] = "input_audio_buffer.append"
    audio: str


class ResponseAudioDeltaEvent(BaseModel):
    """Incoming chunk of synthesized reply audio."""
    type: Literal["response.audio.delta"]
    delta: str
    response_id: Optional[str] = None
    item_id: Optional[str] = None


class TranscriptionCompletedEvent(BaseModel):
    """Incoming transcription of one caller utterance."""
    type: Literal["conversation.item.input_audio_transcription.completed"]
    transcript: str
    item_id: Optional[str] = None


class ResponseContentPart(BaseModel):
    """One content part of a response output item."""
    type: Optional[str] = None
    transcript: Optional[str] = None
    text: Optional[str] = None


class ResponseOutputItem(BaseModel):
    """One output item of a completed response."""
    id: Optional[str] = None
    type: Optional[str] = None
    role: Optional[str] = None
    content: List[ResponseContentPart] = Field(default_factory=list)


class ResponseBody(BaseModel):
    """The response object carried by response.done."""
    id: Optional[str] = None
    status: Optional[str] = None
    output: List[ResponseOutputItem] = Field(default_factory=list)


class ResponseDoneEvent(BaseModel):
    """Incoming event marking the end of an agent response."""
    type: Literal["response.done"]
    response: ResponseBody


class RealtimeErrorEvent(BaseModel):
    """Error event from OpenAI Realtime API."""
    type: Literal["error"]
    error: Dict[str, Any] = Field(default_factory=dict)


class CustomerDetails(BaseModel):
    """Fields extracted from a finished call's transcript."""
    customerName: str
    customerAvailability: str
    specialNotes: str


# Strict JSON schema sent with the extraction request
CUSTOMER_DETAILS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "customerName": {"type": "string"},
        "customerAvailability": {"type": "string"},
        "specialNotes": {"type": "string"},
    },
    "required": ["customerName", "customerAvailability", "specialNotes"],
}
