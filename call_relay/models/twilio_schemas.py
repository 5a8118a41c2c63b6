"""
Pydantic models for Twilio Media Streams message schemas.

This module defines structured data models for the messages exchanged over the
bidirectional media stream socket, providing type validation and documentation.
"""

import base64
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class BaseStreamMessage(BaseModel):
    """Base model for all media stream messages."""

    event: str = Field(..., description="Event type discriminator")
    streamSid: Optional[str] = Field(None, description="Stream identifier")


class StreamStart(BaseModel):
    """Body of the ``start`` event."""

    streamSid: str = Field(..., description="Identifier of the audio stream leg")
    callSid: Optional[str] = Field(None, description="Identifier of the phone call")
    accountSid: Optional[str] = None
    tracks: List[str] = Field(default_factory=list)
    mediaFormat: Optional[Dict[str, Any]] = None
    customParameters: Dict[str, str] = Field(default_factory=dict)

    @field_validator("streamSid")
    def validate_stream_sid(cls, v):
        """Validate that the stream id is not empty."""
        if not v.strip():
            raise ValueError("Stream id cannot be empty")
        return v


class StreamStartMessage(BaseStreamMessage):
    """Model for the ``start`` event sent once when the stream begins."""

    event: Literal["start"]
    sequenceNumber: Optional[str] = None
    start: StreamStart


class OutgoingMediaPayload(BaseModel):
    """Audio payload sent back to the caller."""

    payload: str = Field(..., description="Base64-encoded g711 u-law audio")

    @field_validator("payload")
    def validate_payload(cls, v):
        """Validate that the payload is valid base64."""
        try:
            if v:
                base64.b64decode(v, validate=True)
            else:
                raise ValueError("Audio payload cannot be empty")
        except Exception:
            raise ValueError("Invalid base64 encoded audio data")
        return v


class OutgoingMediaMessage(BaseModel):
    """Model for a ``media`` event sent to Twilio for playback."""

    event: Literal["media"] = "media"
    streamSid: Optional[str] = Field(None, description="Stream the audio belongs to")
    media: OutgoingMediaPayload
