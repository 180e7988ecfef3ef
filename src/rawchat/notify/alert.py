"""Alert notifier — logs notifications, rings the bell, calls optional callback."""

from __future__ import annotations

import logging
from collections.abc import Callable

from rich.console import Console

logger = logging.getLogger(__name__)


class AlertNotifier:
    """Logs notification details and optionally invokes a callback."""

    def __init__(
        self,
        console: Console | None = None,
        bell: bool = True,
        callback: Callable[[str], None] | None = None,
    ) -> None:
        self._console = console
        self._bell = bell
        self._callback = callback
        self.count = 0

    def notify(self, session_id: str) -> None:
        self.count += 1
        logger.info("Activity in %s", session_id)
        if self._console is not None:
            if self._bell:
                self._console.bell()
            self._console.print(f"[bold yellow]* activity in {session_id}[/bold yellow]")
        if self._callback:
            self._callback(session_id)
