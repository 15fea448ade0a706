"""Command: site initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from pressctl.commands._base import PressCommand
from pressctl.services.install import InstallService

if TYPE_CHECKING:
    from pressctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  pressctl init
  pressctl init /srv/site --name "City News" --locale ru"""


@click.command("init", cls=PressCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--name", default=None, help="Site name (defaults to the directory name).")
@click.option("--locale", default="en", show_default=True, help="Content locale.")
@click.pass_obj
def init_cmd(app: AppContext, path: str, name: str | None, locale: str) -> None:
    """Initialize a new pressctl site."""
    site_path = Path(path).resolve()
    app.emit(InstallService.init_site(site_path, name=name or site_path.name, locale=locale))
