"""Session buffer — scrollback text with a live edge separating history from input."""

from __future__ import annotations

import logging
import threading

from rawchat.errors import BufferInsertFailure
from rawchat.surface.base import EditingSurface

logger = logging.getLogger(__name__)


class SessionBuffer:
    """Append-only text store shared by the receive path and the user.

    Everything before ``mark`` is history (received text and sent input).
    Everything from ``mark`` to the end is what the user has typed but not
    yet sent. Received text is always inserted at ``mark``, so typed input
    stays contiguous at the end of the buffer.

    All mutation happens under ``lock`` (re-entrant), which callers may also
    hold to make read-send-consume sequences atomic.
    """

    def __init__(self, name: str = "", surface: EditingSurface | None = None) -> None:
        self.name = name
        self.surface = surface
        self._text = ""
        self._mark = 0
        self._point = 0
        self._window_start = 0
        self._restriction: tuple[int, int] | None = None
        self._discarded = False
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def text(self) -> str:
        with self._lock:
            return self._text

    @property
    def mark(self) -> int:
        return self._mark

    @property
    def point(self) -> int:
        return self._point

    @property
    def window_start(self) -> int:
        return self._window_start

    @property
    def restriction(self) -> tuple[int, int] | None:
        return self._restriction

    @property
    def discarded(self) -> bool:
        return self._discarded

    def __len__(self) -> int:
        return len(self._text)

    def set_point(self, pos: int) -> None:
        """Move the view cursor, clamped to the accessible region."""
        with self._lock:
            low, high = self._restriction or (0, len(self._text))
            self._point = max(low, min(pos, high))

    def set_window_start(self, pos: int) -> None:
        with self._lock:
            self._window_start = max(0, min(pos, len(self._text)))

    def narrow(self, start: int, end: int) -> None:
        """Restrict the view to ``text[start:end]``."""
        with self._lock:
            size = len(self._text)
            start = max(0, min(start, size))
            end = max(start, min(end, size))
            self._restriction = (start, end)
            self._point = max(start, min(self._point, end))

    def widen(self) -> None:
        with self._lock:
            self._restriction = None

    def visible_text(self) -> str:
        """Text inside the view restriction (the whole buffer if none)."""
        with self._lock:
            if self._restriction is None:
                return self._text
            start, end = self._restriction
            return self._text[start:end]

    def insert_at_mark(self, text: str) -> None:
        """Insert received *text* at the live edge.

        The mark moves past the new text. The cursor and the scroll anchor
        move with it when they sat at or after the mark; positions before the
        mark are untouched. Any view restriction is lifted for the insert and
        put back afterwards.
        """
        with self._lock:
            if self._discarded:
                raise BufferInsertFailure(f"Buffer '{self.name}' has been discarded")
            if not isinstance(text, str):
                raise BufferInsertFailure(
                    f"Cannot insert {type(text).__name__} into buffer '{self.name}'"
                )
            if not text:
                return

            restriction = self._restriction
            self._restriction = None
            start = self._mark
            size = len(text)

            self._text = self._text[:start] + text + self._text[start:]
            self._mark = start + size
            if self._point >= start:
                self._point += size
            if self._window_start >= start:
                self._window_start += size

            if restriction is not None:
                low, high = restriction
                if low > start:
                    low += size
                if high >= start:
                    high += size
                self._restriction = (low, high)

        if self.surface is not None:
            try:
                self.surface.append_visible(text)
            except Exception:
                logger.exception("Surface failed to display text for '%s'", self.name)

    def append_status(self, line: str) -> None:
        """Insert a status line at the mark, on a line of its own."""
        with self._lock:
            prefix = ""
            if self._mark > 0 and self._text[self._mark - 1] != "\n":
                prefix = "\n"
            body = line.rstrip("\n")
            self.insert_at_mark(f"{prefix}{body}\n")

    def type_text(self, text: str) -> None:
        """Append user typing at the end of the buffer."""
        with self._lock:
            if self._discarded:
                raise BufferInsertFailure(f"Buffer '{self.name}' has been discarded")
            self._text += text
            self._point = len(self._text)

    def unsent_input(self) -> str:
        """The user's not-yet-sent typing: everything from the mark to the end."""
        with self._lock:
            return self._text[self._mark :]

    def consume_unsent_input(self) -> str:
        """Turn the unsent region into history and return it.

        The text stays in the buffer; only the mark moves.
        """
        with self._lock:
            sent = self._text[self._mark :]
            self._mark = len(self._text)
            return sent

    def discard(self) -> None:
        """Mark the buffer dead. Later inserts raise BufferInsertFailure."""
        with self._lock:
            self._discarded = True
