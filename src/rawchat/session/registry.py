"""Session registry — which sessions exist, keyed by host."""

from __future__ import annotations

import threading
from collections import defaultdict

from rawchat.session.models import ChatSession


class SessionRegistry:
    """Maps hosts to their sessions. Owned by one SessionManager."""

    def __init__(self) -> None:
        self._sessions: list[ChatSession] = []
        self._counters: defaultdict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def peek_instance_id(self, host: str) -> int:
        """The id the next ``next_instance_id(host)`` call will return."""
        with self._lock:
            return self._counters.get(host, 0) + 1

    def next_instance_id(self, host: str) -> int:
        """Allocate the next instance id for *host* (1, 2, 3, ...)."""
        with self._lock:
            self._counters[host] += 1
            return self._counters[host]

    def add(self, session: ChatSession) -> None:
        with self._lock:
            self._sessions.append(session)

    def remove(self, session: ChatSession) -> bool:
        """Drop *session*. Returns False if it was not registered."""
        with self._lock:
            try:
                self._sessions.remove(session)
            except ValueError:
                return False
            return True

    def find_live(self, host: str) -> ChatSession | None:
        """Return the oldest session to *host* whose connection is alive."""
        with self._lock:
            for session in self._sessions:
                if session.host == host and session.is_live:
                    return session
        return None

    def sessions(self) -> list[ChatSession]:
        with self._lock:
            return list(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
