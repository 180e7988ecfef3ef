"""Shared test fixtures."""

from __future__ import annotations

import queue
from pathlib import Path

import pytest

from rawchat.config import RawChatConfig
from rawchat.filters.defaults import DEFAULT_FILTER_RULES, default_notify_rules
from rawchat.filters.pipeline import FilterPipeline
from rawchat.notify.evaluator import NotificationEvaluator
from rawchat.session.buffer import SessionBuffer
from rawchat.session.connection import Connection
from rawchat.session.manager import SessionManager


class FakeTransport:
    """In-memory stand-in for TcpTransport."""

    def __init__(self, open_error: Exception | None = None) -> None:
        self.open_error = open_error
        self.send_error: Exception | None = None
        self.channel: queue.Queue | None = None
        self.sent: list[bytes] = []
        self.closed = False
        self.host = ""
        self.port = 0

    @property
    def is_open(self) -> bool:
        return self.channel is not None and not self.closed

    def open(self, host: str, port: int, channel: queue.Queue) -> None:
        if self.open_error is not None:
            raise self.open_error
        self.host = host
        self.port = port
        self.channel = channel

    def send(self, data: bytes) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(data)

    def close(self) -> None:
        self.closed = True


class FakeSurface:
    """Records what the session engine asks of its view."""

    def __init__(self, buffer: SessionBuffer, focused: bool = True) -> None:
        self.buffer = buffer
        self.focused = focused
        self.shown: list[str] = []
        self.sent_marks = 0
        self.focus_calls = 0

    @property
    def is_focused(self) -> bool:
        return self.focused

    def append_visible(self, text: str) -> None:
        self.shown.append(text)

    def current_unsent_region(self) -> str:
        return self.buffer.unsent_input()

    def mark_sent(self) -> None:
        self.sent_marks += 1

    def focus(self) -> None:
        self.focus_calls += 1
        self.focused = True


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def rules_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "rules.yaml"


@pytest.fixture
def default_pipeline() -> FilterPipeline:
    return FilterPipeline(
        DEFAULT_FILTER_RULES,
        evaluator=NotificationEvaluator(default_notify_rules("alice")),
    )


@pytest.fixture
def buffer() -> SessionBuffer:
    return SessionBuffer(name="chat.example.com")


@pytest.fixture
def fake_transport_cls() -> type[FakeTransport]:
    return FakeTransport


@pytest.fixture
def fake_surface_cls() -> type[FakeSurface]:
    return FakeSurface


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def connection(
    transport: FakeTransport,
    default_pipeline: FilterPipeline,
    buffer: SessionBuffer,
) -> Connection:
    conn = Connection(
        host="chat.example.com",
        port=6667,
        transport=transport,
        pipeline=default_pipeline,
        buffer=buffer,
    )
    conn.open()
    yield conn
    conn.close()


@pytest.fixture
def config() -> RawChatConfig:
    return RawChatConfig(user_name="alice", config_dir=Path("/nonexistent"))


@pytest.fixture
def transports() -> list[FakeTransport]:
    """Every FakeTransport handed out by the ``manager`` fixture, in order."""
    return []


@pytest.fixture
def surfaces() -> list[FakeSurface]:
    return []


@pytest.fixture
def manager(
    config: RawChatConfig,
    transports: list[FakeTransport],
    surfaces: list[FakeSurface],
) -> SessionManager:
    def make_transport() -> FakeTransport:
        t = FakeTransport()
        transports.append(t)
        return t

    def make_surface(session) -> FakeSurface:
        s = FakeSurface(session.buffer)
        surfaces.append(s)
        return s

    mgr = SessionManager(
        config=config,
        surface_factory=make_surface,
        transport_factory=make_transport,
    )
    yield mgr
    mgr.close_all()
