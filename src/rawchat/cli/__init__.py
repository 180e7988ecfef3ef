"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from rawchat import __version__
from rawchat.config import RawChatConfig


@click.group()
@click.version_option(version=__version__, prog_name="rawchat")
@click.option(
    "--rules",
    "-r",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a YAML rules file (filters and notifications).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, rules: str | None, verbose: bool) -> None:
    """rawchat — interactive client for raw TCP chat hosts."""
    ctx.ensure_object(dict)

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = RawChatConfig.load(rules_path=rules)
    config.verbose = verbose
    ctx.obj["config"] = config


def _register_commands() -> None:
    from rawchat.cli.connect import connect  # noqa: F811
    from rawchat.cli.rules import rules  # noqa: F811

    main.add_command(connect)
    main.add_command(rules)


_register_commands()
