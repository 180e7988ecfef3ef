"""Console surface — renders a session buffer on a rich Console."""

from __future__ import annotations

from rich.console import Console

from rawchat.session.buffer import SessionBuffer


class ConsoleSurface:
    """Minimal line-oriented view for the CLI.

    Received text is printed as it arrives. The terminal's own line editing
    is the typing area, so there is nothing to redraw on send.
    """

    def __init__(
        self,
        name: str,
        buffer: SessionBuffer,
        console: Console | None = None,
    ) -> None:
        self.name = name
        self._buffer = buffer
        self._console = console or Console()
        self._focused = True
        self.sent_count = 0

    @property
    def is_focused(self) -> bool:
        return self._focused

    def append_visible(self, text: str) -> None:
        self._console.print(text, end="", markup=False, highlight=False, soft_wrap=True)

    def current_unsent_region(self) -> str:
        return self._buffer.unsent_input()

    def mark_sent(self) -> None:
        self.sent_count += 1

    def focus(self) -> None:
        self._focused = True
        self._console.rule(f"[bold]{self.name}[/bold]")

    def blur(self) -> None:
        self._focused = False
