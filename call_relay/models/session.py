"""
Call session state for the relay.

A CallSession holds everything the relay remembers about one phone call: the
Twilio stream identifier and the running transcript. The SessionStore is the
registry of live sessions, keyed by call id, owned by the media stream manager.
Nothing here is persisted; sessions live only as long as the caller's socket.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from call_relay.config.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class CallSession:
    """In-memory state for one active phone call."""

    call_id: str
    stream_sid: Optional[str] = None
    transcript: str = ""

    def set_stream_sid(self, stream_sid: str) -> bool:
        """
        Record the Twilio stream identifier for this call.

        The identifier is write-once: if a stream id is already set, the new
        value is ignored.

        Args:
            stream_sid: Stream identifier from the Twilio ``start`` event

        Returns:
            bool: True if the value was recorded, False if one was already set
        """
        if self.stream_sid is not None:
            logger.warning(
                f"Ignoring stream id {stream_sid} for call {self.call_id}; "
                f"already set to {self.stream_sid}"
            )
            return False
        self.stream_sid = stream_sid
        return True

    def append_user_line(self, text: str) -> None:
        self.transcript += f"User: {text}\n"

    def append_agent_line(self, text: str) -> None:
        self.transcript += f"Agent: {text}\n"


class SessionStore:
    """
    Registry of live call sessions keyed by call id.

    Each call's handlers only touch their own entry, so the store needs no
    locking on a single event loop.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self.active_sessions: Dict[str, CallSession] = {}

    def add_session(self, session: CallSession) -> CallSession:
        """
        Register a session under its call id, replacing any previous entry.

        Args:
            session: The session to register

        Returns:
            The registered session
        """
        self.active_sessions[session.call_id] = session
        return session

    def get_session(self, call_id: str) -> Optional[CallSession]:
        """
        Get a live session by call id.

        Args:
            call_id: Identifier of the call

        Returns:
            The CallSession, or None if no session exists for this call
        """
        return self.active_sessions.get(call_id)

    def get_or_create_session(self, call_id: str) -> CallSession:
        """
        Return the live session for a call, creating it on first use.

        Args:
            call_id: Identifier of the call

        Returns:
            The existing or newly created CallSession
        """
        session = self.active_sessions.get(call_id)
        if session is None:
            session = self.add_session(CallSession(call_id=call_id))
            logger.info(f"Session created for call: {call_id}")
        return session

    def remove_session(self, call_id: str) -> Optional[CallSession]:
        """
        Remove a session from the registry.

        Args:
            call_id: Identifier of the call to remove

        Returns:
            The removed session, or None if it was not registered
        """
        return self.active_sessions.pop(call_id, None)

    def get_all_sessions(self) -> Dict[str, CallSession]:
        """
        Get all live sessions.

        Returns:
            Dictionary mapping call ids to their sessions
        """
        return self.active_sessions

    def __len__(self) -> int:
        return len(self.active_sessions)
