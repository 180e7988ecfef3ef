"""Transport protocol — all socket implementations must satisfy this."""

from __future__ import annotations

import queue
from typing import Protocol, runtime_checkable

from rawchat.session.models import ChannelMessage


@runtime_checkable
class Transport(Protocol):
    """Protocol for byte-stream transports."""

    def open(self, host: str, port: int, channel: queue.Queue[ChannelMessage]) -> None:
        """Connect and start posting DataReceived / PeerEvent to *channel*.

        Raises ConnectionRefused or HostUnreachable.
        """
        ...

    def send(self, data: bytes) -> None:
        """Write all of *data*. Raises OSError if the transport is gone."""
        ...

    def close(self) -> None:
        """Release the socket. Safe to call more than once."""
        ...

    @property
    def is_open(self) -> bool:
        """Whether the socket is still held."""
        ...
