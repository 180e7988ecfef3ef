"""Notifier protocol — how out-of-focus alerts reach the user."""

from __future__ import annotations

from typing import Protocol


class Notifier(Protocol):
    """Protocol for notification handlers."""

    def notify(self, session_id: str) -> None:
        """Alert the user that *session_id* has text worth looking at."""
        ...
