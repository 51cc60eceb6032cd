"""Subcommand modules for mongochan.

Provides register_commands() which uses deferred imports to keep
``mongochan --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from mongochan.commands.read import fetch
    from mongochan.commands.write import drop, insert, remove, replace

    cli.add_command(fetch)
    cli.add_command(insert)
    cli.add_command(remove)
    cli.add_command(replace)
    cli.add_command(drop)
