"""Subcommand modules for pressctl.

Provides register_commands() which uses deferred imports to keep
``pressctl --help`` fast as the codebase grows.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from pressctl.commands.category import category
    from pressctl.commands.comment import comment
    from pressctl.commands.record import record
    from pressctl.commands.schema import schema

    cli.add_command(schema)
    cli.add_command(record)
    cli.add_command(comment)
    cli.add_command(category)

    # --- Standalone commands ---
    from pressctl.commands.init_cmd import init_cmd

    cli.add_command(init_cmd)
