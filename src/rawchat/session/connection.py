"""Connection — owns one transport and feeds its output into a session buffer."""

from __future__ import annotations

import codecs
import logging
import queue
import threading
from collections.abc import Callable

from rawchat.errors import BufferInsertFailure, ConnectionClosed
from rawchat.filters.pipeline import FilterPipeline
from rawchat.session.buffer import SessionBuffer
from rawchat.session.models import (
    ChannelMessage,
    ConnectionState,
    DataReceived,
    PeerEvent,
)
from rawchat.transport.base import Transport

logger = logging.getLogger(__name__)

# Lines are sent CR-terminated; the host maps CR to LF itself.
LINE_TERMINATOR = b"\r"

# Filters work on bytes; latin-1 maps each byte to exactly one character.
_FILTER_ENCODING = "latin-1"


class Connection:
    """One socket's lifecycle: CONNECTING -> RUNNING -> (STOPPED | CLOSED).

    Locking:
    - ``_receive_lock`` covers each delivery and every state transition, so a
      teardown happens-before any later delivery, which is then dropped.
    - ``_send_lock`` serializes writes only; sending never waits on a receive.
      A failed write is reported through the channel, so the stop runs on the
      dispatcher thread like any other peer event.
    """

    def __init__(
        self,
        host: str,
        port: int,
        transport: Transport,
        pipeline: FilterPipeline,
        buffer: SessionBuffer,
        encoding: str = "utf-8",
        on_notify: Callable[[], None] | None = None,
        view_visible: Callable[[], bool] | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.buffer = buffer
        self._transport = transport
        self._pipeline = pipeline
        self._encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._on_notify = on_notify
        self._view_visible = view_visible
        self._state = ConnectionState.CONNECTING
        self._last_event = ""
        self._send_failure: str | None = None
        self._terminal_status_written = False
        self._channel: queue.Queue[ChannelMessage | None] = queue.Queue()
        self._dispatcher: threading.Thread | None = None
        self._receive_lock = threading.Lock()
        self._send_lock = threading.Lock()
        self.bytes_received = 0
        self.bytes_sent = 0
        self.lines_sent = 0

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def last_event(self) -> str:
        return self._last_event

    @property
    def is_alive(self) -> bool:
        return self._state in (ConnectionState.CONNECTING, ConnectionState.RUNNING)

    def open(self) -> None:
        """Connect the transport and start dispatching its messages.

        Connect errors propagate unchanged and leave the connection CLOSED.
        """
        if self._state is not ConnectionState.CONNECTING:
            raise RuntimeError(f"Connection already {self._state.value}")
        try:
            self._transport.open(self.host, self.port, self._channel)
        except Exception:
            self._state = ConnectionState.CLOSED
            raise
        self._state = ConnectionState.RUNNING
        self._dispatcher = threading.Thread(
            target=self._dispatch_loop,
            name=f"rawchat-dispatch-{self.host}:{self.port}",
            daemon=True,
        )
        self._dispatcher.start()
        logger.info("Connection to %s:%d running", self.host, self.port)

    def dispatch(self, message: ChannelMessage) -> None:
        """Route one channel message to its handler."""
        if isinstance(message, DataReceived):
            self.on_receive(message.data)
        elif isinstance(message, PeerEvent):
            self.on_peer_event(message.event)

    def on_receive(self, data: bytes) -> None:
        """Filter a received chunk and insert it at the buffer's live edge."""
        with self._receive_lock:
            if self._state is not ConnectionState.RUNNING:
                logger.debug(
                    "Dropping %d bytes from %s:%d (%s)",
                    len(data),
                    self.host,
                    self.port,
                    self._state.value,
                )
                return
            self.bytes_received += len(data)

            raw = data.decode(_FILTER_ENCODING)
            visible = self._view_visible() if self._view_visible else True
            result = self._pipeline.process(
                raw,
                view_visible=visible,
                notify_text=data.decode(self._encoding, errors="replace"),
            )
            text = self._decoder.decode(result.text.encode(_FILTER_ENCODING))
            self._insert(text)

        if result.notify and self._on_notify:
            self._on_notify()

    def on_peer_event(self, event: str) -> None:
        """The remote end went away: RUNNING -> STOPPED."""
        with self._receive_lock:
            if self._state is not ConnectionState.RUNNING:
                return
            self._last_event = event
            self._state = ConnectionState.STOPPED
            logger.info("Connection to %s:%d stopped: %s", self.host, self.port, event)
            self._insert(self._decoder.decode(b"", final=True))
            self._write_terminal_status(f"Connection to {self.host} {event}")
        self._transport.close()

    def send(self, text: str) -> None:
        """Send *text* followed by a single carriage return.

        Raises ConnectionClosed if the connection is not running or the
        write fails. Nothing is retried. A failed write is handed to the
        dispatcher as a peer event; this method never takes the receive lock.
        """
        with self._send_lock:
            if self._state is not ConnectionState.RUNNING:
                raise ConnectionClosed(
                    f"Connection to {self.host}:{self.port} is {self._state.value}"
                )
            if self._send_failure is not None:
                raise ConnectionClosed(
                    f"Connection to {self.host}:{self.port} failed: {self._send_failure}"
                )
            payload = text.encode(self._encoding) + LINE_TERMINATOR
            try:
                self._transport.send(payload)
            except OSError as e:
                logger.warning("Send to %s:%d failed: %s", self.host, self.port, e)
                self._send_failure = str(e)
                self._channel.put(PeerEvent(f"failed with error: {e}"))
                raise ConnectionClosed(
                    f"Connection to {self.host}:{self.port} failed: {e}"
                ) from e
            self.bytes_sent += len(payload)
            self.lines_sent += 1

    def close(self) -> None:
        """Tear the connection down. Safe to call repeatedly."""
        with self._receive_lock:
            if self._state is ConnectionState.CLOSED:
                return
            if self._state is ConnectionState.RUNNING:
                self._insert(self._decoder.decode(b"", final=True))
            self._state = ConnectionState.CLOSED
            self._last_event = self._last_event or "closed"
            self._write_terminal_status(f"Connection to {self.host} closed")
        self._transport.close()
        self._channel.put(None)
        logger.info("Connection to %s:%d closed", self.host, self.port)

    def _dispatch_loop(self) -> None:
        while True:
            message = self._channel.get()
            if message is None:
                return
            self.dispatch(message)
            if isinstance(message, PeerEvent):
                return

    def _insert(self, text: str) -> None:
        if not text:
            return
        try:
            self.buffer.insert_at_mark(text)
        except BufferInsertFailure as e:
            logger.warning("Dropped %d characters from %s: %s", len(text), self.host, e)
            self._append_status(f"[rawchat: dropped {len(text)} characters: {e}]")

    def _write_terminal_status(self, line: str) -> None:
        if self._terminal_status_written:
            return
        self._terminal_status_written = True
        self._append_status(line)

    def _append_status(self, line: str) -> None:
        try:
            self.buffer.append_status(line)
        except BufferInsertFailure as e:
            logger.warning("Cannot write status line to %s: %s", self.buffer.name, e)
