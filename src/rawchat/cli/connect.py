"""CLI command: rawchat connect <HOST> — open an interactive chat session."""

from __future__ import annotations

import sys
import time
from datetime import timedelta

import click
from rich.console import Console
from rich.table import Table

from rawchat.config import RawChatConfig
from rawchat.errors import ConnectError, ConnectionClosed
from rawchat.notify.alert import AlertNotifier
from rawchat.session.manager import SessionManager
from rawchat.session.models import ChatSession
from rawchat.surface.console import ConsoleSurface

console = Console(stderr=True)


@click.command()
@click.argument("host")
@click.option("--port", "-P", type=int, default=None, help="Port (default 3555).")
@click.option(
    "--new",
    "force_new",
    is_flag=True,
    help="Open a parallel session even if one to HOST is already live.",
)
@click.pass_context
def connect(ctx: click.Context, host: str, port: int | None, force_new: bool) -> None:
    """Connect to a chat HOST and send each typed line."""
    config: RawChatConfig = ctx.obj["config"]
    output = Console()

    manager = SessionManager(
        config=config,
        surface_factory=lambda s: _make_surface(s, output),
        notifier=AlertNotifier(console=console, bell=config.bell),
    )

    try:
        session = manager.open_or_attach(host, port, force_new=force_new)
    except ConnectError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(2)

    console.print(
        f"[bold]rawchat[/bold] connected to [cyan]{session.host}:{session.port}[/cyan] "
        f"as [cyan]{config.user_name or 'anonymous'}[/cyan]"
    )
    console.print("  Type a line and press Enter to send. Ctrl+D or Ctrl+C to quit.\n")

    stdin = click.get_text_stream("stdin")
    try:
        for line in stdin:
            session.buffer.type_text(line.rstrip("\n"))
            try:
                manager.submit(session)
            except ConnectionClosed as e:
                console.print(f"[red]{e}[/red]")
                break
    except KeyboardInterrupt:
        console.print("\n[dim]Closing...[/dim]")
    finally:
        manager.close_all()

    _print_summary(session)


def _make_surface(session: ChatSession, output: Console) -> ConsoleSurface:
    """Chat output redirected away from a terminal is not being watched."""
    surface = ConsoleSurface(session.name, session.buffer, console=output)
    if not output.is_terminal:
        surface.blur()
    return surface


def _print_summary(session: ChatSession) -> None:
    conn = session.connection
    elapsed = timedelta(seconds=int(time.time() - session.start_time))

    console.print("\n[bold]Session Summary[/bold]")
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()

    table.add_row("Session", session.name)
    table.add_row("Host", f"{session.host}:{session.port}")
    table.add_row("State", conn.state.value)
    table.add_row("Last Event", conn.last_event or "-")
    table.add_row("Received", f"{conn.bytes_received} bytes")
    table.add_row("Sent", f"{conn.lines_sent} lines ({conn.bytes_sent} bytes)")
    table.add_row("Duration", str(elapsed))
    console.print(table)
