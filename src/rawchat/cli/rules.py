"""CLI command: rawchat rules — show the effective filter and notify rules."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from rawchat.config import RawChatConfig

console = Console()


@click.command()
@click.pass_context
def rules(ctx: click.Context) -> None:
    """Show the filter and notification rules in effect."""
    config: RawChatConfig = ctx.obj["config"]

    filters = Table(title="Filters (applied in order)", header_style="bold")
    filters.add_column("#", justify="right")
    filters.add_column("Match")
    filters.add_column("Kind")
    filters.add_column("Description", style="dim")
    for i, rule in enumerate(config.filter_rules, 1):
        kind = "regex" if rule.regex else "literal"
        filters.add_row(str(i), Text(repr(rule.match)), kind, rule.description)
    console.print(filters)

    notify = Table(title="Notifications (first match wins)", header_style="bold")
    notify.add_column("#", justify="right")
    notify.add_column("Match")
    notify.add_column("Kind")
    notify.add_column("Description", style="dim")
    for i, rule in enumerate(config.effective_notify_rules(), 1):
        kind = "regex" if rule.regex else "literal"
        notify.add_row(str(i), Text(repr(rule.match)), kind, rule.description)
    console.print(notify)
