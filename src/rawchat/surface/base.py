"""EditingSurface protocol — the view a session buffer is shown in."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class EditingSurface(Protocol):
    """Protocol for editing surfaces.

    The session engine never moves cursors or scrolls windows itself; it only
    tells the surface what changed.
    """

    def append_visible(self, text: str) -> None:
        """Show text that was just inserted into the buffer."""
        ...

    def current_unsent_region(self) -> str:
        """Return what the user has typed but not yet sent."""
        ...

    def mark_sent(self) -> None:
        """The unsent region was transmitted and is now history."""
        ...

    def focus(self) -> None:
        """Bring this view to the front."""
        ...

    @property
    def is_focused(self) -> bool:
        """Whether this view is the one the user is looking at."""
        ...
