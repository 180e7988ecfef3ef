"""TCP transport — blocking socket with a reader thread feeding the channel."""

from __future__ import annotations

import errno
import logging
import queue
import socket
import threading

from rawchat.errors import ConnectionRefused, HostUnreachable
from rawchat.session.models import ChannelMessage, DataReceived, PeerEvent

logger = logging.getLogger(__name__)

_UNREACHABLE_ERRNOS = frozenset(
    {errno.EHOSTUNREACH, errno.ENETUNREACH, errno.EHOSTDOWN, errno.ETIMEDOUT}
)


class TcpTransport:
    """Outbound TCP connection.

    A daemon thread reads the socket and posts each chunk as DataReceived,
    then exactly one PeerEvent when the stream ends. Sends happen on the
    caller's thread, so reads and writes never wait on each other.
    """

    def __init__(self, recv_size: int = 4096, connect_timeout: float = 10.0) -> None:
        self._recv_size = recv_size
        self._connect_timeout = connect_timeout
        self._sock: socket.socket | None = None
        self._reader: threading.Thread | None = None
        self._closing = threading.Event()

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def open(self, host: str, port: int, channel: queue.Queue[ChannelMessage]) -> None:
        try:
            sock = socket.create_connection((host, port), timeout=self._connect_timeout)
        except ConnectionRefusedError as e:
            raise ConnectionRefused(host, port, e.strerror or str(e)) from e
        except socket.gaierror as e:
            raise HostUnreachable(host, port, e.strerror or str(e)) from e
        except TimeoutError as e:
            raise HostUnreachable(host, port, "timed out") from e
        except OSError as e:
            if e.errno in _UNREACHABLE_ERRNOS:
                raise HostUnreachable(host, port, e.strerror or str(e)) from e
            raise ConnectionRefused(host, port, e.strerror or str(e)) from e

        sock.settimeout(None)
        self._sock = sock
        self._reader = threading.Thread(
            target=self._read_loop,
            args=(sock, channel),
            name=f"rawchat-recv-{host}:{port}",
            daemon=True,
        )
        self._reader.start()
        logger.debug("Connected to %s:%d", host, port)

    def send(self, data: bytes) -> None:
        sock = self._sock
        if sock is None:
            raise OSError(errno.ENOTCONN, "transport is not open")
        sock.sendall(data)

    def close(self) -> None:
        sock = self._sock
        if sock is None:
            return
        self._closing.set()
        self._sock = None
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # peer already gone
        sock.close()

    def _read_loop(self, sock: socket.socket, channel: queue.Queue[ChannelMessage]) -> None:
        event = "broken by remote peer"
        try:
            while True:
                data = sock.recv(self._recv_size)
                if not data:
                    break
                channel.put(DataReceived(data))
        except OSError as e:
            if not self._closing.is_set():
                event = f"failed with error: {e}"
                logger.warning("Receive error: %s", e)
        if self._closing.is_set():
            event = "closed"
        channel.put(PeerEvent(event))
