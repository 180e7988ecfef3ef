"""Session manager — opens, finds, feeds and tears down chat sessions."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from rawchat.config import RawChatConfig
from rawchat.filters.pipeline import FilterPipeline
from rawchat.notify.base import Notifier
from rawchat.notify.evaluator import NotificationEvaluator
from rawchat.session.buffer import SessionBuffer
from rawchat.session.connection import Connection
from rawchat.session.models import ChatSession, session_name
from rawchat.session.registry import SessionRegistry
from rawchat.surface.base import EditingSurface
from rawchat.transport.base import Transport
from rawchat.transport.tcp import TcpTransport

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the session registry and wires each session's collaborators.

    Every session gets its own transport, buffer and filter pipeline; nothing
    but the registry is shared between sessions.
    """

    def __init__(
        self,
        config: RawChatConfig | None = None,
        surface_factory: Callable[[ChatSession], EditingSurface] | None = None,
        notifier: Notifier | None = None,
        transport_factory: Callable[[], Transport] | None = None,
        registry: SessionRegistry | None = None,
    ) -> None:
        self._config = config or RawChatConfig()
        self._surface_factory = surface_factory
        self._notifier = notifier
        self._transport_factory = transport_factory or self._tcp_transport
        self._registry = registry or SessionRegistry()
        self._open_lock = threading.Lock()

    @property
    def config(self) -> RawChatConfig:
        return self._config

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    def open_or_attach(
        self,
        host: str,
        port: int | None = None,
        force_new: bool = False,
    ) -> ChatSession:
        """Return the live session to *host*, or connect a new one.

        With *force_new*, always connects a parallel session. Raises
        ConnectionRefused / HostUnreachable if connecting fails, in which
        case no session is registered and no instance id is used up.

        Lookup, connect and registration happen under one lock, so
        concurrent callers for the same host share one session.
        """
        with self._open_lock:
            if not force_new:
                existing = self._registry.find_live(host)
                if existing is not None:
                    logger.info("Attaching to existing session %s", existing.name)
                    if existing.surface is not None:
                        existing.surface.focus()
                    return existing
            return self._open_session(host, port or self._config.default_port)

    def _open_session(self, host: str, port: int) -> ChatSession:
        # Only read here; the id is claimed once the connect succeeds
        instance_id = self._registry.peek_instance_id(host)
        buffer = SessionBuffer(name=session_name(host, instance_id))
        pipeline = FilterPipeline(
            self._config.filter_rules,
            evaluator=NotificationEvaluator(self._config.effective_notify_rules()),
        )

        session: ChatSession | None = None

        def on_notify() -> None:
            if session is not None:
                self._notify(session)

        def view_visible() -> bool:
            if session is None or session.surface is None:
                return True
            return session.surface.is_focused

        connection = Connection(
            host=host,
            port=port,
            transport=self._transport_factory(),
            pipeline=pipeline,
            buffer=buffer,
            encoding=self._config.encoding,
            on_notify=on_notify,
            view_visible=view_visible,
        )
        session = ChatSession(
            host=host,
            port=port,
            instance_id=instance_id,
            connection=connection,
            buffer=buffer,
        )
        if self._surface_factory is not None:
            session.surface = self._surface_factory(session)
            buffer.surface = session.surface

        connection.open()
        self._registry.next_instance_id(host)
        self._registry.add(session)
        logger.info("Opened session %s (%s)", session.name, session.id)
        return session

    def submit(self, session: ChatSession) -> str:
        """Send the session's unsent input and turn it into history.

        Raises ConnectionClosed, leaving the input unsent, if the connection
        is not running.
        """
        buffer = session.buffer
        surface = session.surface
        with buffer.lock:
            if surface is not None:
                text = surface.current_unsent_region()
            else:
                text = buffer.unsent_input()
            session.connection.send(text)
            buffer.consume_unsent_input()
        if surface is not None:
            surface.mark_sent()
        return text

    def close(self, session: ChatSession) -> None:
        """Close the connection and forget the session. The buffer stays readable."""
        session.connection.close()
        self._registry.remove(session)

    def discard(self, session: ChatSession) -> None:
        """Close the session and discard its buffer."""
        self.close(session)
        session.buffer.discard()

    def close_all(self) -> None:
        for session in self._registry.sessions():
            self.close(session)

    def _notify(self, session: ChatSession) -> None:
        if self._notifier is None:
            return
        if session.surface is not None and session.surface.is_focused:
            return
        self._notifier.notify(session.id)

    def _tcp_transport(self) -> Transport:
        return TcpTransport(
            recv_size=self._config.recv_size,
            connect_timeout=self._config.connect_timeout,
        )
