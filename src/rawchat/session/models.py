"""Session data models — connection state, channel messages, and sessions."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rawchat.session.buffer import SessionBuffer
from rawchat.surface.base import EditingSurface

if TYPE_CHECKING:
    from rawchat.session.connection import Connection


class ConnectionState(enum.Enum):
    """Lifecycle state of one connection. Never returns to RUNNING."""

    CONNECTING = "connecting"
    RUNNING = "running"
    STOPPED = "stopped"
    CLOSED = "closed"


@dataclass(frozen=True)
class DataReceived:
    """Bytes read from the socket, in arrival order."""

    data: bytes


@dataclass(frozen=True)
class PeerEvent:
    """The transport reported end of stream or an error."""

    event: str


# Both kinds travel on the same per-connection queue, so they stay ordered.
ChannelMessage = DataReceived | PeerEvent


def session_name(host: str, instance_id: int) -> str:
    """``host`` for the first session to a host, ``host<N>`` after that."""
    if instance_id <= 1:
        return host
    return f"{host}<{instance_id}>"


@dataclass(eq=False)
class ChatSession:
    """One logical chat connection: a connection, its buffer, and its view."""

    host: str
    port: int
    instance_id: int
    connection: Connection
    buffer: SessionBuffer
    surface: EditingSurface | None = None
    start_time: float = field(default_factory=time.time)

    @property
    def name(self) -> str:
        return session_name(self.host, self.instance_id)

    @property
    def id(self) -> str:
        return f"{self.host}:{self.port}#{self.instance_id}"

    @property
    def is_live(self) -> bool:
        return self.connection.is_alive
