"""
Simple in-memory registry of per-browser UI state.
Stores one AppState per session id (the value of the session cookie).
"""
import logging
import secrets
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from recircle.services.app_state import AppState

logger = logging.getLogger("recircle.sessions")


class SessionStore:
    """Thread-safe AppState registry keyed by session id"""

    def __init__(
        self,
        ttl: timedelta = timedelta(hours=12),
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self._states: Dict[str, AppState] = {}
        self._touched: Dict[str, datetime] = {}
        self._lock = threading.Lock()
        self._ttl = ttl
        self._clock = clock

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(24)

    def get(self, session_id: str) -> Optional[AppState]:
        with self._lock:
            state = self._states.get(session_id)
            if state is not None:
                self._touched[session_id] = self._clock()
            return state

    def update(self, session_id: str, fn: Callable[[AppState], AppState]) -> AppState:
        """
        Apply fn to the current state and store the result atomically.
        fn must not do network I/O; the lock is held while it runs.
        """
        with self._lock:
            state = self._states.get(session_id, AppState())
            new_state = fn(state)
            self._states[session_id] = new_state
            self._touched[session_id] = self._clock()
            return new_state

    def get_or_create(self, session_id: Optional[str]) -> Tuple[str, AppState, bool]:
        """
        Returns (session_id, state, created). Ids not already registered are
        never adopted; a new session always gets a server-minted id.
        """
        with self._lock:
            now = self._clock()
            if session_id and session_id in self._states:
                self._touched[session_id] = now
                return session_id, self._states[session_id], False

            expired = self._drop_expired(now)
            session_id = self.new_session_id()
            state = AppState()
            self._states[session_id] = state
            self._touched[session_id] = now

        if expired:
            logger.info("sessions: dropped %d idle sessions", len(expired))
        logger.info("sessions: started session %s...", session_id[:6])
        return session_id, state, True

    def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        """Drop sessions idle for longer than the ttl; returns how many."""
        with self._lock:
            expired = self._drop_expired(now or self._clock())
        if expired:
            logger.info("sessions: dropped %d idle sessions", len(expired))
        return len(expired)

    def _drop_expired(self, now: datetime) -> List[str]:
        # Caller holds the lock
        cutoff = now - self._ttl
        expired = [sid for sid, ts in self._touched.items() if ts < cutoff]
        for sid in expired:
            self._states.pop(sid, None)
            self._touched.pop(sid, None)
        return expired

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)


# Global instance
session_store = SessionStore()
