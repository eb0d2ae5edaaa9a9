"""
Registry of active bridge sessions.

This module provides the SessionRegistry class which maps Twilio call identifiers
to the bridge session handling that call. Tools that act on the live call (such
as transfer) look sessions up here; sessions remove themselves when they close.
"""

import threading
from typing import Any, Dict, Optional


class SessionRegistry:
    """
    Thread-safe map from call sid to active bridge session.

    Sessions are registered when Twilio announces the call and removed when the
    session closes. No ordering is kept across calls.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._sessions: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def register(self, call_sid: str, session: Any) -> None:
        """
        Add a session to the registry, replacing any stale entry for the call.

        Args:
            call_sid: Twilio call identifier
            session: The bridge session handling the call
        """
        with self._lock:
            self._sessions[call_sid] = session

    def get(self, call_sid: str) -> Optional[Any]:
        """
        Get the active session for a call.

        Returns:
            The session, or None if the call has no active session
        """
        with self._lock:
            return self._sessions.get(call_sid)

    def remove(self, call_sid: str, session: Any = None) -> bool:
        """
        Remove a call from the registry.

        Args:
            call_sid: Twilio call identifier
            session: If given, only remove the entry when it still points at this session

        Returns:
            True if an entry was removed
        """
        with self._lock:
            current = self._sessions.get(call_sid)
            if current is None or (session is not None and current is not session):
                return False
            del self._sessions[call_sid]
            return True

    def __contains__(self, call_sid: str) -> bool:
        with self._lock:
            return call_sid in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
