"""Error kinds raised by the session engine."""

from __future__ import annotations


class RawChatError(Exception):
    """Base class for all rawchat errors."""


class ConnectError(RawChatError):
    """Opening the transport failed; no session was created."""

    summary = "Cannot connect to"

    def __init__(self, host: str, port: int, reason: str = "") -> None:
        self.host = host
        self.port = port
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(f"{self.summary} {host}:{port}{detail}")


class ConnectionRefused(ConnectError):
    summary = "Connection refused by"


class HostUnreachable(ConnectError):
    summary = "Host unreachable:"


class ConnectionClosed(RawChatError):
    """Send attempted on a connection that is not running."""


class MalformedFilterRule(RawChatError):
    """A filter or notify rule could not be compiled."""


class BufferInsertFailure(RawChatError):
    """Inserting received text into a session buffer failed."""
